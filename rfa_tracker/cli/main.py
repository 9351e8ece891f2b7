"""CLI entry point for the RFA allocation tracker.

Usage:
    rfa-tracker table
    rfa-tracker table --search smoke --sort name --direction asc
    rfa-tracker stats --output json
    rfa-tracker wrappers --range 30d --denomination bera
"""

import logging
import time
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.live import Live
from rich.logging import RichHandler
from rich.text import Text

from ..core.config import AppConfig, get_config
from ..core.exceptions import ConfigurationError
from ..core.models import Project
from ..core.types import Denomination, SortDirection, SortField, TimeRange
from ..orchestrator import AllocationTracker
from ..output.audit_trail import AuditTrailFormatter
from ..output.formatters import TableFormatter, get_formatter

# Initialize app
app = typer.Typer(
    name="rfa-tracker",
    help="Berachain RFA allocation tracker and BGT wrapper premiums",
    add_completion=False,
)

console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_time=False, show_path=False)],
        force=True,
    )


def _build_tracker(csv: Optional[Path], tokens_config: Optional[Path] = None) -> AllocationTracker:
    config = get_config()
    if csv or tokens_config:
        config = AppConfig(
            csv_path=csv or config.csv_path,
            berachain_api_url=config.berachain_api_url,
            avatar_base_url=config.avatar_base_url,
            tokens_config_path=tokens_config or config.tokens_config_path,
            refresh_seconds=config.refresh_seconds,
            request_timeout=config.request_timeout,
        )
    try:
        return AllocationTracker(config=config)
    except ConfigurationError as e:
        console.print(f"[red]Configuration error: {e}[/]")
        raise typer.Exit(1)


def _parse_enum(enum_cls, value: str, label: str):
    try:
        return enum_cls(value.lower())
    except ValueError:
        valid = ", ".join(member.value for member in enum_cls)
        console.print(f"[red]Invalid {label}: {value}[/]")
        console.print(f"Valid values: {valid}")
        raise typer.Exit(1)


def _emit(content: str, output: str, save: Optional[Path]) -> None:
    if output.lower() == "table":
        # Rendered by rich already
        console.print(Text.from_ansi(content), end="")
    else:
        print(content)

    if save:
        save.parent.mkdir(parents=True, exist_ok=True)
        formatter = get_formatter(output)
        if isinstance(formatter, TableFormatter):
            save = save.with_suffix(".txt")
        formatter.write(content, str(save))
        console.print(f"[green]Saved to {save}[/]")


def _show_audit(tracker: AllocationTracker) -> None:
    console.print("")
    console.print(AuditTrailFormatter().format_summary(tracker.get_audit_trail()), markup=False)


@app.command()
def table(
    csv: Optional[Path] = typer.Option(
        None,
        "--csv",
        help="Allocation CSV (defaults to RFA_CSV_PATH)",
    ),
    search: Optional[str] = typer.Option(
        None,
        "--search", "-q",
        help="Case-insensitive project name filter",
    ),
    sort: str = typer.Option(
        "amount",
        "--sort",
        help="Sort column: amount, name",
    ),
    direction: str = typer.Option(
        "desc",
        "--direction", "-d",
        help="Sort direction: asc, desc",
    ),
    output: str = typer.Option(
        "table",
        "--output", "-o",
        help="Output format: table, json, csv",
    ),
    save: Optional[Path] = typer.Option(
        None,
        "--save", "-s",
        help="Save output to file",
    ),
    no_price: bool = typer.Option(
        False,
        "--no-price",
        help="Skip the BERA price lookup (USD column shows Unknown)",
    ),
    avatars: bool = typer.Option(
        False,
        "--avatars",
        help="Resolve avatar URLs (json output)",
    ),
    audit: bool = typer.Option(
        False,
        "--audit", "-a",
        help="Show audit trail of data source calls",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable verbose logging",
    ),
) -> None:
    """
    Show the ranked allocation table.

    Examples:
        rfa-tracker table
        rfa-tracker table --search "@smoke" --sort name
        rfa-tracker table --output csv --save results/allocations.csv
    """
    setup_logging(verbose)

    sort_field = _parse_enum(SortField, sort, "sort column")
    sort_direction = _parse_enum(SortDirection, direction, "sort direction")

    tracker = _build_tracker(csv)
    snapshot = tracker.load_snapshot()
    bera_price = 0.0 if no_price else tracker.get_bera_price()

    rows = tracker.build_table(
        snapshot,
        query=search,
        sort_field=sort_field,
        sort_direction=sort_direction,
        bera_price=bera_price,
        with_avatars=avatars,
    )

    if not rows and not snapshot.projects:
        console.print("[yellow]No allocations loaded[/]")

    formatter = get_formatter(output)
    _emit(formatter.format_table(rows, bera_price), output, save)

    if audit:
        _show_audit(tracker)


@app.command()
def stats(
    csv: Optional[Path] = typer.Option(None, "--csv", help="Allocation CSV (defaults to RFA_CSV_PATH)"),
    output: str = typer.Option("table", "--output", "-o", help="Output format: table, json, csv"),
    save: Optional[Path] = typer.Option(None, "--save", "-s", help="Save output to file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Show allocation analytics: totals, tiers, top projects and others."""
    setup_logging(verbose)

    tracker = _build_tracker(csv)
    snapshot = tracker.load_snapshot()
    summary = tracker.get_stats(snapshot)

    formatter = get_formatter(output)
    _emit(formatter.format_stats(summary), output, save)


@app.command()
def wrappers(
    time_range: str = typer.Option(
        "7d",
        "--range", "-r",
        help="Chart window: 7d, 30d",
    ),
    denomination: str = typer.Option(
        "usd",
        "--denomination", "-u",
        help="Chart unit: usd, bera",
    ),
    tokens_config: Optional[Path] = typer.Option(
        None,
        "--tokens-config",
        help="YAML file overriding the token registry",
    ),
    output: str = typer.Option("table", "--output", "-o", help="Output format: table, json, csv"),
    save: Optional[Path] = typer.Option(None, "--save", "-s", help="Save output to file"),
    audit: bool = typer.Option(False, "--audit", "-a", help="Show audit trail of data source calls"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """
    Show BGT wrapper prices and their premium over BERA.

    Examples:
        rfa-tracker wrappers
        rfa-tracker wrappers --range 30d --denomination bera --output csv
    """
    setup_logging(verbose)

    window = _parse_enum(TimeRange, time_range, "range")
    unit = _parse_enum(Denomination, denomination, "denomination")

    tracker = _build_tracker(None, tokens_config)
    report = tracker.get_wrapper_report(time_range=window, denomination=unit)

    formatter = get_formatter(output)
    _emit(formatter.format_wrappers(report), output, save)

    if audit:
        _show_audit(tracker)


@app.command()
def avatar(
    handle: str = typer.Argument(..., help="Twitter handle, with or without '@'"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Resolve the avatar image URL for a handle."""
    setup_logging(verbose)

    tracker = _build_tracker(None)
    url = tracker.avatar_provider.get_avatar_url(handle)
    if url is None:
        initials = Project(project_name=handle).initials
        console.print(f"[yellow]No avatar found, showing initials: {initials}[/]")
        raise typer.Exit(1)

    print(url)


@app.command()
def watch(
    csv: Optional[Path] = typer.Option(None, "--csv", help="Allocation CSV (defaults to RFA_CSV_PATH)"),
    interval: Optional[int] = typer.Option(
        None,
        "--interval", "-i",
        help="Seconds between refreshes (defaults to RFA_REFRESH_SECONDS)",
    ),
    iterations: int = typer.Option(
        0,
        "--iterations", "-n",
        help="Stop after N refreshes (0 = run until interrupted)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """
    Re-read the CSV and BERA price periodically and redraw the table.

    Each refresh replaces the previous view; a failed price fetch shows
    the table with an unknown USD column instead of stopping the loop.
    """
    setup_logging(verbose)

    tracker = _build_tracker(csv)
    seconds = interval if interval and interval > 0 else tracker.config.refresh_seconds
    formatter = TableFormatter()

    def render() -> Text:
        snapshot = tracker.load_snapshot()
        bera_price = tracker.get_bera_price()
        rows = tracker.build_table(snapshot, bera_price=bera_price)
        return Text.from_ansi(formatter.format_table(rows, bera_price))

    count = 0
    try:
        with Live(render(), console=console, auto_refresh=False) as live:
            count += 1
            while not iterations or count < iterations:
                time.sleep(seconds)
                live.update(render(), refresh=True)
                count += 1
    except KeyboardInterrupt:
        console.print("[dim]Stopped[/]")


@app.command()
def version() -> None:
    """Show version information."""
    from .. import __version__
    console.print(f"RFA Tracker v{__version__}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
