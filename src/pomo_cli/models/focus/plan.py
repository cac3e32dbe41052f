"""Round plan for a Pomodoro run: focus, break, focus, ..., focus."""

from dataclasses import dataclass
from enum import Enum


class Phase(Enum):
    """Countdown mode of the timer."""

    IDLE = "idle"
    FOCUS = "focus"
    SHORT_BREAK = "short_break"

    @property
    def label(self) -> str:
        """Human readable name."""
        return {
            Phase.IDLE: "Idle",
            Phase.FOCUS: "Focus",
            Phase.SHORT_BREAK: "Short Break",
        }[self]


def plan_length(target_rounds: int) -> int:
    """Number of positions in a plan: N focus sessions and N - 1 breaks."""
    return target_rounds * 2 - 1


def is_focus_position(index: int) -> bool:
    """Even positions are focus, odd positions are breaks."""
    return index % 2 == 0


@dataclass(frozen=True)
class SessionPlan:
    """Ordered sequence of phases derived from the round target.

    ``target_rounds`` must be at least 1; the settings model clamps it.
    """

    target_rounds: int

    def __len__(self) -> int:
        return plan_length(self.target_rounds)

    @property
    def last_index(self) -> int:
        return len(self) - 1

    def phase_at(self, index: int) -> Phase:
        """Phase for a position in the plan."""
        if not 0 <= index < len(self):
            raise IndexError(f"plan position {index} out of range 0..{self.last_index}")
        return Phase.FOCUS if is_focus_position(index) else Phase.SHORT_BREAK

    def phases(self) -> list[Phase]:
        """All phases in order."""
        return [self.phase_at(i) for i in range(len(self))]

    def is_last(self, index: int) -> bool:
        return index >= self.last_index

    def focus_number(self, index: int) -> int:
        """1-based round number that a position belongs to."""
        return index // 2 + 1

    def progress_dots(self, index: int) -> str:
        """Dots showing finished, current and upcoming focus rounds."""
        current_round = self.focus_number(index)
        on_focus = is_focus_position(index)
        dots = []
        for round_number in range(1, self.target_rounds + 1):
            if round_number < current_round or (
                round_number == current_round and not on_focus
            ):
                dots.append("●")  # Completed
            elif round_number == current_round:
                dots.append("◉")  # Current
            else:
                dots.append("○")  # Upcoming
        return " ".join(dots)
