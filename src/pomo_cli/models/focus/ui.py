"""Terminal timer UI for focus mode."""

from rich.align import Align
from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from pomo_cli.utils.ui.formatters import format_duration, get_progress_bar

from .plan import Phase, SessionPlan
from .state import SessionStateMachine, TimerState

PHASE_STYLE = {
    Phase.IDLE: ("⏹", "dim"),
    Phase.FOCUS: ("🍅", "cyan"),
    Phase.SHORT_BREAK: ("☕", "green"),
}


class TimerDisplay:
    """Builds the live countdown panel."""

    def render(self, machine: SessionStateMachine) -> Panel:
        """Create the panel for the machine's current state."""
        state = machine.state
        plan = machine.plan
        emoji, color = PHASE_STYLE[state.phase]

        if state.phase is not Phase.IDLE and not state.is_running:
            title = f"⏸  PAUSED - {state.phase.label}"
            color = "yellow"
        else:
            title = f"{emoji}  {state.phase.label}"

        components = [
            Text(title, style=f"bold {color}", justify="center"),
            Text(""),
            self._timer_text(state, color),
            Text(""),
            Text(
                f"{get_progress_bar(machine.progress)}  {int(machine.progress * 100)}%",
                style="dim",
                justify="center",
            ),
            Text(""),
            self._plan_text(state, plan),
        ]

        return Panel(
            Align.center(Group(*components), vertical="middle"),
            title="Pomo",
            subtitle=self._footer_text(state),
            border_style=color,
        )

    @staticmethod
    def _timer_text(state: TimerState, color: str) -> Text:
        if state.is_running and state.time_remaining < 60:
            color = "red"
        return Text(state.time_string, style=f"bold {color}", justify="center")

    @staticmethod
    def _plan_text(state: TimerState, plan: SessionPlan) -> Text:
        text = Text(justify="center")
        text.append(plan.progress_dots(state.current_index))
        text.append(
            f"   round {plan.focus_number(state.current_index)}/{plan.target_rounds}"
            f"  •  {state.completed_focus_count} done",
            style="dim",
        )
        return text

    @staticmethod
    def _footer_text(state: TimerState) -> str:
        """Keyboard hints."""
        toggle = "'p' pause" if state.is_running else "'p' resume"
        return f"{toggle}  •  'n' next  •  'b' back  •  'r' reset  •  's' stop  •  'q' quit"


def completion_message(phase: Phase, machine: SessionStateMachine) -> str:
    """One line describing a finished phase and what comes next."""
    if phase is Phase.FOCUS:
        done = f"Focus session complete ({format_duration(machine.duration_for(phase))})"
    else:
        done = "Break over"

    if machine.phase is Phase.IDLE:
        return f"{done}. All rounds finished!"
    upcoming = machine.phase.label
    if machine.is_running:
        return f"{done}. {upcoming} started."
    return f"{done}. Press 'p' to start {upcoming.lower()}."
