"""Output formatters for allocation tables, analytics and wrapper premiums.

Provides multiple output formats:
- JSON: Machine-readable, complete data
- CSV: Spreadsheet-compatible table export
- Table: Human-readable CLI output (rich)
"""

import csv
import io
import json
import logging
from abc import ABC, abstractmethod
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..core.models import AllocationStats, TableRow, WrapperReport
from ..core.types import AllocationTier
from ..ranking.ranker import format_rank

logger = logging.getLogger(__name__)

UNKNOWN_LABEL = "Unknown"


def format_bera(amount: float, decimals: int = 2) -> str:
    """Format an amount with thousands separators and up to `decimals` fraction digits."""
    text = f"{amount:,.{decimals}f}"
    if decimals > 0:
        text = text.rstrip("0").rstrip(".")
    return text


def format_amount_cell(row: TableRow) -> str:
    if not row.project.is_known:
        return UNKNOWN_LABEL
    return format_bera(row.project.bera_amount)


def format_usd_cell(row: TableRow) -> str:
    if row.usd_value is None:
        return UNKNOWN_LABEL
    return f"${format_bera(row.usd_value)}"


def format_premium(premium: float) -> str:
    sign = "+" if premium > 0 else ""
    return f"{sign}{premium:.2f}%"


class OutputFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def format_table(self, rows: list[TableRow], bera_price: float = 0.0) -> str:
        """Format allocation table rows as a string."""
        pass

    @abstractmethod
    def format_stats(self, stats: AllocationStats) -> str:
        """Format analytics summary as a string."""
        pass

    @abstractmethod
    def format_wrappers(self, report: WrapperReport) -> str:
        """Format wrapper prices and premiums as a string."""
        pass

    def write(self, content: str, filepath: str) -> None:
        """Write formatted content to a file."""
        with open(filepath, "w", encoding="utf-8", newline="") as f:
            f.write(content)


class JSONFormatter(OutputFormatter):
    """Formats results as JSON."""

    def __init__(self, indent: int = 2):
        self.indent = indent

    def _dump(self, data: Any) -> str:
        return json.dumps(data, indent=self.indent, default=str)

    def format_table(self, rows: list[TableRow], bera_price: float = 0.0) -> str:
        """Format rows as a JSON list, including derived handle and profile link."""
        data = []
        for row in rows:
            data.append(
                {
                    "rank": row.rank,
                    "project_name": row.project.project_name,
                    "twitter_handle": row.project.twitter_handle,
                    "bera_amount": row.project.bera_amount if row.project.is_known else None,
                    "usd_value": row.usd_value,
                    "profile_url": row.project.profile_url,
                    "avatar_url": row.avatar_url,
                }
            )
        return self._dump({"bera_price": bera_price, "projects": data})

    def format_stats(self, stats: AllocationStats) -> str:
        return self._dump(stats.model_dump(mode="json"))

    def format_wrappers(self, report: WrapperReport) -> str:
        return self._dump(report.model_dump(mode="json"))


class CSVFormatter(OutputFormatter):
    """Formats results as CSV."""

    def __init__(self, delimiter: str = ","):
        self.delimiter = delimiter

    def _writer(self) -> tuple[io.StringIO, Any]:
        output = io.StringIO()
        return output, csv.writer(output, delimiter=self.delimiter)

    def format_table(self, rows: list[TableRow], bera_price: float = 0.0) -> str:
        """Format rows with rank, name, handle, amount and USD value."""
        output, writer = self._writer()
        writer.writerow(["rank", "project_name", "twitter_handle", "bera_amount", "usd_value"])
        for row in rows:
            writer.writerow([
                format_rank(row.rank),
                row.project.project_name,
                row.project.twitter_handle,
                row.project.bera_amount if row.project.is_known else "",
                f"{row.usd_value:.2f}" if row.usd_value is not None else "",
            ])
        return output.getvalue()

    def format_stats(self, stats: AllocationStats) -> str:
        """Summary metrics followed by the per-project shares."""
        output, writer = self._writer()

        writer.writerow(["# Summary"])
        writer.writerow(["Metric", "Value"])
        writer.writerow(["Total Allocation", stats.total_allocation])
        writer.writerow(["Average Allocation", stats.average_allocation])
        writer.writerow(["Known Projects", stats.known_count])
        writer.writerow(["Unknown Projects", stats.unknown_count])
        writer.writerow(["Large Tier", stats.tiers.large])
        writer.writerow(["Medium Tier", stats.tiers.medium])
        writer.writerow(["Small Tier", stats.tiers.small])
        writer.writerow([])

        writer.writerow(["# Shares"])
        writer.writerow(["Project", "Amount", "Percentage"])
        for share in stats.pie_data:
            writer.writerow([share.name, share.amount, f"{share.percentage:.4f}"])

        return output.getvalue()

    def format_wrappers(self, report: WrapperReport) -> str:
        """Wrapper cards followed by the joined price series."""
        output, writer = self._writer()

        writer.writerow(["# Wrappers"])
        writer.writerow(["Name", "Symbol", "Address", "Latest Price", "Premium %"])
        for w in report.wrappers:
            writer.writerow([w.name, w.symbol, w.address, w.latest_price, f"{w.premium_percent:.4f}"])
        writer.writerow([])

        keys = [w.key for w in report.wrappers]
        writer.writerow([f"# Prices ({report.time_range.value}, {report.denomination.value})"])
        writer.writerow(["timestamp"] + keys)
        for row in report.price_rows:
            writer.writerow([row.timestamp] + [row.values.get(k, 0.0) for k in keys])

        return output.getvalue()


class TableFormatter(OutputFormatter):
    """Formats results as human-readable tables for CLI output."""

    def __init__(self, color: bool = True, width: int = 100, top_n: int = 10):
        """
        Initialize table formatter.

        Args:
            color: Emit ANSI colors
            width: Maximum table width
            top_n: Rows in the top projects list
        """
        self.color = color
        self.width = width
        self.top_n = top_n

    def _render(self, *renderables: Any) -> str:
        output = io.StringIO()
        console = Console(file=output, force_terminal=self.color, no_color=not self.color, width=self.width)
        for renderable in renderables:
            console.print(renderable)
        return output.getvalue()

    def format_table(self, rows: list[TableRow], bera_price: float = 0.0) -> str:
        table = Table(title="RFA Allocations")
        table.add_column("#", justify="right", style="yellow")
        table.add_column("Project", style="cyan")
        table.add_column("BERA Amount", justify="right", style="green")
        table.add_column("USD Value", justify="right", style="green")

        for row in rows:
            table.add_row(
                format_rank(row.rank),
                row.project.project_name,
                format_amount_cell(row),
                format_usd_cell(row),
            )

        header = f"Current BERA Price: ${format_bera(bera_price)}"
        note = '[dim]Note: "Unknown" means the allocation amount is not yet confirmed[/]'
        return self._render(header, note, table)

    def format_stats(self, stats: AllocationStats) -> str:
        summary = Table(title="Allocation Summary", show_header=False)
        summary.add_column("Metric", style="cyan")
        summary.add_column("Value", style="green")
        summary.add_row("Total BERA Allocated", format_bera(stats.total_allocation))
        summary.add_row("Known Projects", str(stats.known_count))
        summary.add_row("Unknown Projects", str(stats.unknown_count))
        summary.add_row("Average Allocation", format_bera(stats.average_allocation))
        summary.add_row(AllocationTier.LARGE.display_name, str(stats.tiers.large))
        summary.add_row(AllocationTier.MEDIUM.display_name, str(stats.tiers.medium))
        summary.add_row(AllocationTier.SMALL.display_name, str(stats.tiers.small))

        top = Table(title=f"Top {self.top_n} Projects")
        top.add_column("Project", style="cyan")
        top.add_column("Share", justify="right", style="dim")
        top.add_column("BERA", justify="right", style="green")
        for share in stats.top_projects[: self.top_n]:
            top.add_row(share.name, f"{share.percentage:.1f}%", format_bera(share.amount))

        renderables: list[Any] = [summary, top]

        if stats.others.count:
            others = stats.others
            lines = [f"{others.count} projects, total {format_bera(others.total_amount)} BERA"]
            for share in others.top:
                lines.append(f"  {share.name}: {format_bera(share.amount)}")
            if others.remaining_count > 0:
                lines.append(f"  and {others.remaining_count} more projects...")
            renderables.append(Panel("\n".join(lines), title="Others", expand=False))

        return self._render(*renderables)

    def format_wrappers(self, report: WrapperReport) -> str:
        table = Table(title="BGT Wrapper Premiums")
        table.add_column("Token", style="cyan")
        table.add_column("Price (USD)", justify="right", style="green")
        table.add_column("Premium", justify="right")
        table.add_column("Address", style="dim")

        for w in report.wrappers:
            style = "green" if w.premium_percent > 0 else "red" if w.premium_percent < 0 else "dim"
            table.add_row(
                w.name,
                f"${w.latest_price:.2f}",
                f"[{style}]{format_premium(w.premium_percent)}[/]",
                w.address,
            )

        footer = (
            f"[dim]{len(report.price_rows)} chart points over {report.time_range.value} "
            f"({report.denomination.value.upper()})[/]"
        )
        return self._render(table, footer)


def get_formatter(output: str) -> OutputFormatter:
    """Formatter for an output format name (table, json, csv)."""
    output_lower = output.lower()
    if output_lower == "json":
        return JSONFormatter()
    if output_lower == "csv":
        return CSVFormatter()
    return TableFormatter()


