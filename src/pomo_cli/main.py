"""Main entry point for Pomo CLI."""

import typer
from rich.console import Console

from pomo_cli import __version__
from pomo_cli.commands import config, focus, stats
from pomo_cli.utils.logger import get_logger

app = typer.Typer(
    name="pomo",
    help="A Pomodoro focus timer with session history and statistics",
    no_args_is_help=True,
)

console = Console()

# Add subcommands
app.add_typer(focus.app, name="focus", help="Pomodoro timer for focus sessions")
app.add_typer(stats.app, name="stats", help="Statistics and session history")
app.add_typer(config.app, name="config", help="Configuration management")


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]Pomo CLI[/bold] version [cyan]{__version__}[/cyan]")


@app.callback()
def main_callback() -> None:
    """Initialise logging before any command runs."""
    get_logger().debug("Pomo CLI v%s", __version__)


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
