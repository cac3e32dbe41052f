"""Statistics and history commands."""

from pathlib import Path

import typer
from rich.table import Table

from pomo_cli.commands.decorators import AppError, command_wrapper
from pomo_cli.commands.focus import get_history_store
from pomo_cli.models.focus.analytics import FocusAnalytics
from pomo_cli.models.focus.filters import DateRangeFilter
from pomo_cli.services.config_service import get_config_service
from pomo_cli.utils.ui.console import get_console
from pomo_cli.utils.ui.formatters import (
    format_duration,
    format_output,
    format_success,
)

console = get_console()
app = typer.Typer(help="Focus statistics and session history")

RANGE_HELP = "Date range: " + ", ".join(option.slug for option in DateRangeFilter)
CHART_WIDTH = 30


def _parse_range(value: str | None) -> DateRangeFilter:
    if value is None:
        value = get_config_service().config.default_range
    try:
        return DateRangeFilter.from_label(value)
    except ValueError as e:
        raise AppError(str(e)) from e


@app.command("summary")
@command_wrapper
def summary(
    date_range: str = typer.Option(None, "--range", "-r", help=RANGE_HELP),
    output: str = typer.Option("pretty", "--output", "-o", help="pretty, json or yaml"),
):
    """Show totals, averages and streaks."""
    option = _parse_range(date_range)
    stats = FocusAnalytics(get_history_store()).summary(option)

    if output != "pretty":
        format_output(stats, output)
        return

    table = Table(title=f"Focus stats - {stats['range']}", show_header=False)
    table.add_column("Metric", style="bold cyan")
    table.add_column("Value", justify="right")
    table.add_row("Total focus time", format_duration(stats["total_focus_seconds"]))
    table.add_row("Completed pomodoros", str(stats["completed_sessions"]))
    table.add_row("Average per day", format_duration(stats["average_per_day_seconds"]))
    table.add_row("Average session", format_duration(stats["average_session_seconds"]))
    table.add_row("Current streak", f"{stats['current_streak']} days")
    table.add_row("Best streak", f"{stats['best_streak']} days")
    console.print(table)


@app.command("daily")
@command_wrapper
def daily(
    date_range: str = typer.Option(None, "--range", "-r", help=RANGE_HELP),
    output: str = typer.Option("pretty", "--output", "-o", help="pretty, json or yaml"),
):
    """Show focus time per day as a bar chart."""
    option = _parse_range(date_range)
    totals = FocusAnalytics(get_history_store()).daily_totals(option)

    if output != "pretty":
        format_output(
            [
                {"day": t.day, "duration_seconds": t.duration_seconds, "count": t.count}
                for t in totals
            ],
            output,
        )
        return

    if not totals:
        console.print("[dim]No sessions recorded. Complete focus sessions to see statistics here.[/dim]")
        return

    peak = max(t.duration_seconds for t in totals) or 1
    table = Table(title=f"Daily focus - {option.label}")
    table.add_column("Day")
    table.add_column("Focus", justify="right")
    table.add_column("Sessions", justify="right")
    table.add_column("")
    for total in totals:
        bar = "█" * max(1, round(CHART_WIDTH * total.duration_seconds / peak))
        table.add_row(
            total.day.strftime("%a %Y-%m-%d"),
            format_duration(total.duration_seconds),
            str(total.count),
            f"[cyan]{bar}[/cyan]",
        )
    console.print(table)


@app.command("history")
@command_wrapper
def history(
    date_range: str = typer.Option(None, "--range", "-r", help=RANGE_HELP),
    limit: int = typer.Option(20, "--limit", "-l", help="Most recent N records"),
    output: str = typer.Option("pretty", "--output", "-o", help="pretty, json or yaml"),
):
    """List recorded sessions, newest first."""
    option = _parse_range(date_range)
    records = list(reversed(get_history_store().query(option)))[:limit]
    rows = [
        {
            "id": r.id[:8],
            "completed": r.timestamp.astimezone().strftime("%Y-%m-%d %H:%M"),
            "kind": r.kind.value,
            "duration": format_duration(r.duration_seconds),
        }
        for r in records
    ]
    if output != "pretty":
        format_output([r.to_dict() for r in records], output)
        return
    if not rows:
        console.print("[dim]No sessions recorded[/dim]")
        return
    format_output(rows)


@app.command("clear")
@command_wrapper
def clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Delete all session history. This cannot be undone."""
    store = get_history_store()
    if not yes and not typer.confirm(
        f"Clear all {len(store)} recorded sessions? This cannot be undone.",
        default=False,
    ):
        console.print("Cancelled.")
        return
    store.clear()
    if store.has_unsaved_changes:
        raise AppError("History cleared in memory but could not be written to disk")
    format_success("Session history cleared")


@app.command("export")
@command_wrapper
def export(path: Path = typer.Argument(..., help="CSV file to write")):
    """Export all sessions to CSV."""
    store = get_history_store()
    try:
        store.export_csv(path)
    except OSError as e:
        raise AppError(f"Cannot write {path}: {e}") from e
    format_success(f"Exported {len(store)} sessions to {path}")
