"""Output formatters for different formats."""

import json
from datetime import date, datetime
from typing import Any

import yaml
from rich.table import Table

from pomo_cli.utils.ui.console import get_console

console = get_console()


def _to_plain(data: Any) -> Any:
    """Make dates JSON/YAML friendly."""
    if isinstance(data, dict):
        return {k: _to_plain(v) for k, v in data.items()}
    if isinstance(data, (list, tuple)):
        return [_to_plain(v) for v in data]
    if isinstance(data, (datetime, date)):
        return data.isoformat()
    return data


def format_output(data: Any, output_format: str = "pretty") -> None:
    """Format and display output based on format."""
    if output_format == "json":
        print(json.dumps(_to_plain(data), indent=2, default=str))
    elif output_format == "yaml":
        print(yaml.safe_dump(_to_plain(data), sort_keys=False, allow_unicode=True))
    elif isinstance(data, list):
        format_dict_table(data)
    elif isinstance(data, dict):
        format_single_item(data)
    else:
        console.print(data)


def format_dict_table(items: list[dict], title: str | None = None) -> None:
    """Render a list of dicts as a table with one column per key."""
    if not items:
        console.print("[dim]No items found[/dim]")
        return

    table = Table(title=title, show_header=True, header_style="bold cyan")
    for key in items[0]:
        table.add_column(key.replace("_", " ").title())
    for item in items:
        table.add_row(*(str(_to_plain(value)) for value in item.values()))
    console.print(table)


def format_single_item(item: dict, title: str | None = None) -> None:
    """Render one dict as a two-column key/value table."""
    table = Table(title=title, show_header=False, box=None)
    table.add_column("Key", style="bold cyan")
    table.add_column("Value")
    for key, value in item.items():
        table.add_row(key.replace("_", " ").title(), str(_to_plain(value)))
    console.print(table)


def format_error(message: str) -> None:
    """Format and display an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def format_warning(message: str) -> None:
    """Format and display a warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")


def format_duration(seconds: float) -> str:
    """Human readable duration: ``1h 05m``, ``25m``, ``45s``."""
    total = int(round(seconds))
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}h {minutes:02d}m"
    if minutes:
        return f"{minutes}m"
    return f"{secs}s"


def get_progress_bar(fraction: float, width: int = 40) -> str:
    """Get a progress bar representation of a 0..1 fraction."""
    fraction = min(1.0, max(0.0, fraction))
    filled = int(width * fraction)
    return "▓" * filled + "░" * (width - filled)
