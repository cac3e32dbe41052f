"""Focus mode commands with a live Pomodoro countdown."""

import threading
import time

import typer
from rich.live import Live
from rich.table import Table

from pomo_cli.commands.decorators import command_wrapper
from pomo_cli.models.config_models import TimerSettings
from pomo_cli.models.focus.history import HistoryStore
from pomo_cli.models.focus.keyboard import KeyboardHandler
from pomo_cli.models.focus.plan import Phase, SessionPlan
from pomo_cli.models.focus.scheduler import ThreadingScheduler
from pomo_cli.models.focus.state import SessionStateMachine
from pomo_cli.models.focus.ui import TimerDisplay, completion_message
from pomo_cli.services.config_service import get_config_service
from pomo_cli.utils.ui.console import get_console
from pomo_cli.utils.ui.formatters import format_duration, format_warning

console = get_console()
app = typer.Typer(help="Focus mode with Pomodoro timer")

POLL_INTERVAL = 0.1  # seconds between keyboard polls / redraws


def get_history_store() -> HistoryStore:
    """HistoryStore at the configured data location."""
    return HistoryStore(get_config_service().history_path)


def build_settings(
    rounds: int | None = None,
    focus_minutes: float | None = None,
    break_minutes: float | None = None,
    auto: bool | None = None,
) -> TimerSettings:
    """Configured timer settings with command-line overrides applied."""
    data = get_config_service().config.timer.model_dump()
    if rounds is not None:
        data["target_rounds"] = rounds
    if focus_minutes is not None:
        data["focus_duration"] = focus_minutes * 60
    if break_minutes is not None:
        data["break_duration"] = break_minutes * 60
    if auto is not None:
        data["auto_start_break"] = auto
    return TimerSettings.model_validate(data)


def run_session(
    machine: SessionStateMachine,
    keyboard: KeyboardHandler,
    display: TimerDisplay,
    bell: bool = True,
) -> str:
    """
    Drive the live display until the plan finishes or the user quits.

    Returns:
        "finished", "stopped" or "quit"
    """
    finished = threading.Event()

    def on_phase_completed(phase: Phase) -> None:
        if bell:
            console.bell()
        console.print(f"[bold green]✓[/bold green] {completion_message(phase, machine)}")
        if machine.phase is Phase.IDLE:
            finished.set()

    unsubscribe = machine.phase_completed.subscribe(on_phase_completed)
    actions = {
        "p": machine.toggle_pause,
        " ": machine.toggle_pause,
        "n": machine.skip,
        "b": machine.go_back,
        "r": machine.reset_phase,
    }

    machine.start()
    try:
        with Live(display.render(machine), console=console, refresh_per_second=4) as live:
            while not finished.is_set():
                key = keyboard.get_key()
                if key == "q":
                    return "quit"
                if key == "s":
                    machine.stop()
                    return "stopped"
                if key in actions:
                    actions[key]()
                live.update(display.render(machine))
                time.sleep(POLL_INTERVAL)
            live.update(display.render(machine))
        return "finished"
    finally:
        unsubscribe()
        machine.scheduler.cancel()
        keyboard.stop()


@app.command("start")
@command_wrapper
def start_focus(
    rounds: int = typer.Option(None, "--rounds", "-n", help="Focus rounds in the plan"),
    focus_minutes: float = typer.Option(
        None, "--focus", "-f", help="Focus length in minutes"
    ),
    break_minutes: float = typer.Option(
        None, "--break", "-b", help="Break length in minutes"
    ),
    auto: bool = typer.Option(
        None, "--auto/--no-auto", help="Start the next phase automatically"
    ),
):
    """Start a Pomodoro run with a live countdown."""
    settings = build_settings(rounds, focus_minutes, break_minutes, auto)
    history = get_history_store()
    machine = SessionStateMachine(settings, history, ThreadingScheduler())

    plan = SessionPlan(settings.target_rounds)
    console.print("\n[bold green]🍅 Pomodoro started[/bold green]")
    console.print(
        f"{settings.target_rounds} rounds of {format_duration(settings.focus_duration)}"
        f" focus / {format_duration(settings.break_duration)} break"
        f" ({len(plan)} phases)\n"
    )

    result = run_session(
        machine,
        KeyboardHandler(),
        TimerDisplay(),
        bell=get_config_service().config.output.bell,
    )

    if result == "finished":
        console.print("\n[bold green]All rounds complete. Nice work![/bold green]")
    else:
        console.print(
            f"\n[yellow]Session {result}.[/yellow] "
            f"{machine.completed_focus_count} focus round(s) recorded this run."
        )
    if history.has_unsaved_changes:
        format_warning("History could not be saved; see the log file.")


@app.command("plan")
@command_wrapper
def show_plan(
    rounds: int = typer.Option(None, "--rounds", "-n", help="Focus rounds in the plan"),
):
    """Show the phases of a full Pomodoro run."""
    settings = build_settings(rounds=rounds)
    plan = SessionPlan(settings.target_rounds)

    table = Table(title=f"Plan: {settings.target_rounds} rounds")
    table.add_column("#", justify="right")
    table.add_column("Phase")
    table.add_column("Duration", justify="right")
    for index, phase in enumerate(plan.phases()):
        duration = (
            settings.focus_duration if phase is Phase.FOCUS else settings.break_duration
        )
        table.add_row(str(index + 1), phase.label, format_duration(duration))
    console.print(table)
