"""Tests for the CSV allocation provider."""

import logging
from pathlib import Path

from rfa_tracker.core.types import DataSource
from rfa_tracker.providers.allocations.csv_alloc import CSVAllocationProvider


class TestParseText:
    """Tests for tolerant CSV parsing."""

    def test_parses_header_and_rows(self):
        provider = CSVAllocationProvider()
        records = provider.parse_text("project_name,bera_amount\n@a,100\n@b,\n")

        assert records == [
            {"project_name": "@a", "bera_amount": "100"},
            {"project_name": "@b", "bera_amount": ""},
        ]

    def test_trims_values_and_header(self):
        provider = CSVAllocationProvider()
        records = provider.parse_text(" project_name , bera_amount \n  @a  ,  42 \n")

        assert records == [{"project_name": "@a", "bera_amount": "42"}]

    def test_empty_text(self):
        """Empty input yields no records instead of an error."""
        provider = CSVAllocationProvider()
        assert provider.parse_text("") == []
        assert provider.parse_text("   \n\n") == []

    def test_header_only(self):
        provider = CSVAllocationProvider()
        assert provider.parse_text("project_name,bera_amount\n") == []

    def test_ragged_rows_are_relaxed(self):
        """Short rows are padded, extra cells dropped, nothing aborts."""
        provider = CSVAllocationProvider()
        text = "project_name,bera_amount\n@short\n@long,5,extra,cells\n@ok,7\n"
        records = provider.parse_text(text)

        assert records == [
            {"project_name": "@short", "bera_amount": ""},
            {"project_name": "@long", "bera_amount": "5"},
            {"project_name": "@ok", "bera_amount": "7"},
        ]

    def test_blank_lines_skipped(self):
        provider = CSVAllocationProvider()
        records = provider.parse_text("project_name,bera_amount\n\n@a,1\n , \n@b,2\n")

        assert [r["project_name"] for r in records] == ["@a", "@b"]

    def test_byte_order_mark_stripped(self):
        provider = CSVAllocationProvider()
        records = provider.parse_text("\ufeffproject_name,bera_amount\n@a,1\n")

        assert records[0]["project_name"] == "@a"

    def test_quoted_values(self):
        provider = CSVAllocationProvider()
        records = provider.parse_text('project_name,bera_amount\n"@a, Inc",1\n')

        assert records[0]["project_name"] == "@a, Inc"


class TestGetRecords:
    """Tests for file loading."""

    def test_loads_fixture(self, sample_csv: Path):
        provider = CSVAllocationProvider(sample_csv)
        records = provider.get_records()

        assert len(records) == 5
        assert records[0] == {"project_name": "@alpha", "bera_amount": "100000"}
        assert provider.is_available()

    def test_missing_file_returns_empty(self, tmp_path: Path):
        """An absent file is recoverable: empty result and a failed audit entry."""
        provider = CSVAllocationProvider(tmp_path / "missing.csv")

        assert provider.get_records() == []
        assert not provider.is_available()

        trail = provider.get_audit_trail()
        assert len(trail) == 1
        assert trail[0].source == DataSource.CSV
        assert trail[0].success is False

    def test_empty_file_returns_empty(self, tmp_path: Path):
        path = tmp_path / "empty.csv"
        path.write_text("", encoding="utf-8")

        assert CSVAllocationProvider(path).get_records() == []

    def test_missing_and_empty_files_are_logged(self, tmp_path: Path, caplog):
        empty = tmp_path / "empty.csv"
        empty.write_text("", encoding="utf-8")

        with caplog.at_level(logging.WARNING, logger="rfa_tracker.providers.allocations.csv_alloc"):
            CSVAllocationProvider(tmp_path / "missing.csv").get_records()
            CSVAllocationProvider(empty).get_records()

        levels = [r.levelno for r in caplog.records]
        assert logging.ERROR in levels
        assert logging.WARNING in levels
        assert any("not found" in r.getMessage() for r in caplog.records)
        assert any("empty" in r.getMessage() for r in caplog.records)

    def test_no_path_configured(self):
        assert CSVAllocationProvider().get_records() == []

    def test_path_override(self, tmp_path: Path, sample_csv: Path):
        provider = CSVAllocationProvider(tmp_path / "missing.csv")
        assert len(provider.get_records(sample_csv)) == 5

    def test_successful_load_is_audited(self, sample_csv: Path):
        provider = CSVAllocationProvider(sample_csv)
        provider.get_records()

        trail = provider.get_audit_trail()
        assert trail[-1].success is True
        assert trail[-1].notes == "Loaded 5 rows"


class TestGetRawRecords:
    """Tests for typed raw records."""

    def test_skips_rows_without_name(self, tmp_path: Path):
        path = tmp_path / "alloc.csv"
        path.write_text("project_name,bera_amount\n,100\n@a,\n", encoding="utf-8")

        records = CSVAllocationProvider(path).get_raw_records()

        assert len(records) == 1
        assert records[0].project_name == "@a"
        assert records[0].bera_amount == ""

    def test_missing_amount_column(self, tmp_path: Path):
        """A missing column reads as empty text for every row."""
        path = tmp_path / "alloc.csv"
        path.write_text("project_name\n@a\n", encoding="utf-8")

        records = CSVAllocationProvider(path).get_raw_records()

        assert records[0].bera_amount == ""
