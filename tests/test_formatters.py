"""Tests for output formatters and the audit trail."""

import csv
import io
import json

import pytest

from rfa_tracker.calculator.aggregator import AllocationAggregator
from rfa_tracker.calculator.premium import build_chart_rows, build_wrappers
from rfa_tracker.core.models import AuditEntry, Project, TableRow, WrapperReport
from rfa_tracker.core.types import DataSource
from rfa_tracker.output.audit_trail import AuditTrailFormatter
from rfa_tracker.output.formatters import (
    CSVFormatter,
    JSONFormatter,
    TableFormatter,
    format_bera,
    format_premium,
    get_formatter,
)


@pytest.fixture
def rows() -> list[TableRow]:
    return [
        TableRow(rank=1, project=Project(project_name="@alpha", bera_amount=100_000), usd_value=500_000),
        TableRow(rank=None, project=Project(project_name="@delta"), usd_value=None),
    ]


@pytest.fixture
def report(bera_token, ibgt_token, history, now) -> WrapperReport:
    return WrapperReport(
        wrappers=build_wrappers(bera_token, [ibgt_token], {"bera": 5.0, "ibgt": 6.0}),
        price_rows=build_chart_rows(history, now=now),
    )


class TestFormatHelpers:
    """Tests for number formatting."""

    @pytest.mark.parametrize(
        "amount,expected",
        [
            (1_234_567.891, "1,234,567.89"),
            (1000, "1,000"),
            (0.5, "0.5"),
            (0, "0"),
        ],
    )
    def test_format_bera(self, amount, expected):
        assert format_bera(amount) == expected

    def test_format_bera_no_decimals(self):
        assert format_bera(1234.4, decimals=0) == "1,234"

    def test_format_premium(self):
        assert format_premium(20.0) == "+20.00%"
        assert format_premium(-3.456) == "-3.46%"
        assert format_premium(0.0) == "0.00%"

    def test_get_formatter(self):
        assert isinstance(get_formatter("json"), JSONFormatter)
        assert isinstance(get_formatter("CSV"), CSVFormatter)
        assert isinstance(get_formatter("table"), TableFormatter)


class TestJSONFormatter:
    """Tests for JSON output."""

    def test_table(self, rows):
        data = json.loads(JSONFormatter().format_table(rows, bera_price=5.0))

        assert data["bera_price"] == 5.0
        assert data["projects"][0]["twitter_handle"] == "alpha"
        assert data["projects"][0]["profile_url"] == "https://twitter.com/alpha"
        assert data["projects"][1]["rank"] is None
        assert data["projects"][1]["bera_amount"] is None

    def test_stats(self, projects):
        stats = AllocationAggregator().summarize(projects)
        data = json.loads(JSONFormatter().format_stats(stats))

        assert data["total_allocation"] == 225_000
        assert data["tiers"]["medium"] == 2

    def test_wrappers(self, report):
        data = json.loads(JSONFormatter().format_wrappers(report))

        assert data["wrappers"][1]["premium_percent"] == pytest.approx(20.0)
        assert data["time_range"] == "7d"


class TestCSVFormatter:
    """Tests for CSV output."""

    def test_table(self, rows):
        parsed = list(csv.reader(io.StringIO(CSVFormatter().format_table(rows))))

        assert parsed[0] == ["rank", "project_name", "twitter_handle", "bera_amount", "usd_value"]
        assert parsed[1] == ["1", "@alpha", "alpha", "100000.0", "500000.00"]
        assert parsed[2] == ["-", "@delta", "delta", "", ""]

    def test_stats(self, projects):
        stats = AllocationAggregator().summarize(projects)
        output = CSVFormatter().format_stats(stats)

        assert "Total Allocation,225000.0" in output
        assert "@alpha" in output

    def test_wrappers(self, report):
        output = CSVFormatter().format_wrappers(report)

        assert "timestamp,bera,ibgt" in output
        assert "BGT (1:1 BERA)" in output


class TestTableFormatter:
    """Tests for human-readable output."""

    def test_table(self, rows):
        output = TableFormatter(color=False).format_table(rows, bera_price=5.0)

        assert "@alpha" in output
        assert "100,000" in output
        assert "$500,000" in output
        assert "Unknown" in output
        assert "Current BERA Price: $5" in output

    def test_stats_with_others(self):
        projects = [Project(project_name=f"@p{i:02d}", bera_amount=i * 1000) for i in range(1, 26)]
        stats = AllocationAggregator().summarize(projects)
        output = TableFormatter(color=False).format_stats(stats)

        assert "Top 10 Projects" in output
        assert "Others" in output
        assert "and 5 more projects" in output

    def test_stats_without_others(self, projects):
        stats = AllocationAggregator().summarize(projects)
        output = TableFormatter(color=False).format_stats(stats)

        assert "Allocation Summary" in output
        assert "and 0 more" not in output

    def test_wrappers(self, report):
        output = TableFormatter(color=False, width=140).format_wrappers(report)

        assert "BGT (1:1 BERA)" in output
        assert "+20.00%" in output

    def test_write(self, rows, tmp_path):
        path = tmp_path / "out.json"
        formatter = JSONFormatter()
        formatter.write(formatter.format_table(rows), str(path))

        assert json.loads(path.read_text(encoding="utf-8"))["projects"][0]["rank"] == 1


class TestAuditTrailFormatter:
    """Tests for the audit summary."""

    @pytest.fixture
    def entries(self) -> list[AuditEntry]:
        return [
            AuditEntry(source=DataSource.CSV, action="load", endpoint="data/rfa.csv", duration_ms=3),
            AuditEntry(
                source=DataSource.BERACHAIN_API,
                action="fetch",
                endpoint="query GetTokenCurrentPrices",
                success=False,
                error_message="HTTP 503",
            ),
        ]

    def test_summarize_sources(self, entries):
        summary = AuditTrailFormatter().summarize_sources(entries)

        assert summary["csv"]["success_count"] == 1
        assert summary["berachain_api"]["success_count"] == 0
        assert summary["berachain_api"]["endpoints"] == ["query GetTokenCurrentPrices"]

    def test_format_summary(self, entries):
        output = AuditTrailFormatter().format_summary(entries)

        assert "csv: OK" in output
        assert "berachain_api: FAILED" in output
        assert "Error: HTTP 503" in output
        assert "Duration: 3ms" in output

    def test_empty(self):
        assert "(none)" in AuditTrailFormatter().format_summary([])
