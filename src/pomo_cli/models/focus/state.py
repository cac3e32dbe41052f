"""Session state machine driving the Pomodoro countdown."""

import logging
import threading
from dataclasses import dataclass, replace
from typing import Protocol

from .events import Event
from .history import SessionKind
from .plan import Phase, SessionPlan
from .scheduler import TICK_INTERVAL, Scheduler

logger = logging.getLogger(__name__)


class SettingsProvider(Protocol):
    """Read-only timer configuration, consulted at every phase setup.

    ``target_rounds`` must be at least 1. The provider enforces this; the
    state machine does not re-validate it.
    """

    @property
    def focus_duration_seconds(self) -> float: ...

    @property
    def break_duration_seconds(self) -> float: ...

    @property
    def target_rounds(self) -> int: ...

    @property
    def auto_start_break(self) -> bool: ...


class HistorySink(Protocol):
    """Receiver of completed focus sessions."""

    def append(self, duration_seconds: float, kind: SessionKind): ...


@dataclass(frozen=True)
class TimerState:
    """Snapshot of the state machine."""

    phase: Phase = Phase.IDLE
    time_remaining: float = 0.0
    is_running: bool = False
    completed_focus_count: int = 0
    current_index: int = 0

    @property
    def time_string(self) -> str:
        """Remaining time as MM:SS."""
        remaining = int(self.time_remaining)
        return f"{remaining // 60:02d}:{remaining % 60:02d}"


class SessionStateMachine:
    """Owns the current phase, countdown and position within the plan.

    Every public operation runs under one re-entrant lock, mutates state
    completely, then fires ``state_changed`` (and ``phase_completed`` on
    completion) synchronously.
    """

    def __init__(
        self,
        settings: SettingsProvider,
        history: HistorySink,
        scheduler: Scheduler,
    ):
        """Initialize in the idle state with a full focus countdown."""
        self.settings = settings
        self.history = history
        self.scheduler = scheduler

        self.state_changed = Event("state_changed")
        self.phase_completed = Event("phase_completed")

        self._lock = threading.RLock()
        self._tick_generation = 0
        self._state = TimerState(time_remaining=settings.focus_duration_seconds)

    # Read-only views

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def phase(self) -> Phase:
        return self._state.phase

    @property
    def time_remaining(self) -> float:
        return self._state.time_remaining

    @property
    def is_running(self) -> bool:
        return self._state.is_running

    @property
    def completed_focus_count(self) -> int:
        return self._state.completed_focus_count

    @property
    def current_index(self) -> int:
        return self._state.current_index

    @property
    def plan(self) -> SessionPlan:
        return SessionPlan(self.settings.target_rounds)

    def duration_for(self, phase: Phase) -> float:
        """Configured duration of a phase; idle counts as focus."""
        if phase is Phase.SHORT_BREAK:
            return self.settings.break_duration_seconds
        return self.settings.focus_duration_seconds

    @property
    def progress(self) -> float:
        """Fraction of the current phase elapsed; 1.0 while idle."""
        if self._state.phase is Phase.IDLE:
            return 1.0
        total = self.duration_for(self._state.phase)
        if total <= 0:
            return 0.0
        return (total - self._state.time_remaining) / total

    # Commands

    def start(self) -> None:
        """Start a focus countdown from the idle state."""
        with self._lock:
            if self._state.phase is not Phase.IDLE:
                self._resume_locked()
                return
            self._state = replace(
                self._state,
                phase=Phase.FOCUS,
                time_remaining=self.settings.focus_duration_seconds,
            )
            self._start_ticking()
            logger.info("Focus started at position %d", self._state.current_index)
        self._notify()

    def pause(self) -> None:
        with self._lock:
            if not self._state.is_running:
                return
            self._stop_ticking()
            logger.info("Paused %s at %s", self._state.phase.value, self._state.time_string)
        self._notify()

    def resume(self) -> None:
        """Continue the current phase; from idle this starts focus."""
        with self._lock:
            if self._state.is_running:
                return
            if self._state.phase is Phase.IDLE:
                self._state = replace(
                    self._state,
                    phase=Phase.FOCUS,
                    time_remaining=self.settings.focus_duration_seconds,
                )
            self._resume_locked()
        self._notify()

    def toggle_pause(self) -> None:
        if self._state.is_running:
            self.pause()
        else:
            self.resume()

    def skip(self) -> None:
        """Move to the next plan position, wrapping to the start after the last."""
        with self._lock:
            self._stop_ticking()
            plan = self.plan
            if self._state.current_index < plan.last_index:
                self._setup_position(self._state.current_index + 1)
            else:
                self._state = replace(self._state, completed_focus_count=0)
                self._setup_position(0)
            logger.info("Skipped to position %d", self._state.current_index)
        self._notify()

    def go_back(self) -> None:
        """Move to the previous plan position; no-op at the first."""
        with self._lock:
            self._stop_ticking()
            if self._state.current_index > 0:
                self._setup_position(self._state.current_index - 1)
                logger.info("Went back to position %d", self._state.current_index)
        self._notify()

    def stop(self) -> None:
        """Return to idle with a full focus countdown."""
        with self._lock:
            self._stop_ticking()
            self._state = replace(
                self._state,
                phase=Phase.IDLE,
                time_remaining=self.settings.focus_duration_seconds,
            )
            logger.info("Stopped")
        self._notify()

    def reset_phase(self) -> None:
        """Restart the current phase countdown; idle becomes focus."""
        with self._lock:
            self._stop_ticking()
            phase = self._state.phase
            if phase is Phase.IDLE:
                phase = Phase.FOCUS
            self._state = replace(
                self._state, phase=phase, time_remaining=self.duration_for(phase)
            )
        self._notify()

    def tick(self) -> None:
        """Advance the countdown by one second. Ignored unless running."""
        self._advance(None)

    # Internals

    def _advance(self, generation: int | None) -> None:
        """One tick; ``generation`` drops ticks from a cancelled timer."""
        completed = None
        with self._lock:
            if generation is not None and generation != self._tick_generation:
                return
            if not self._state.is_running:
                return
            if self._state.time_remaining > 0:
                remaining = max(0.0, self._state.time_remaining - TICK_INTERVAL)
                self._state = replace(self._state, time_remaining=remaining)
            if self._state.time_remaining <= 0:
                completed = self._complete_phase()
        if completed is not None:
            self.phase_completed.emit(completed)
        self._notify()

    def _setup_position(self, index: int) -> None:
        phase = self.plan.phase_at(index)
        self._state = replace(
            self._state,
            phase=phase,
            current_index=index,
            time_remaining=self.duration_for(phase),
        )

    def _complete_phase(self) -> Phase | None:
        """Bookkeeping for a finished countdown. Returns the completed phase."""
        finished = self._state.phase
        self._stop_ticking()

        if finished is Phase.FOCUS:
            self._state = replace(
                self._state, completed_focus_count=self._state.completed_focus_count + 1
            )
            self.history.append(self.settings.focus_duration_seconds, SessionKind.FOCUS)

        logger.info(
            "Completed %s at position %d", finished.value, self._state.current_index
        )

        if not self.plan.is_last(self._state.current_index):
            self._setup_position(self._state.current_index + 1)
            if self.settings.auto_start_break:
                self._start_ticking()
        else:
            self._state = replace(
                self._state,
                phase=Phase.IDLE,
                current_index=0,
                completed_focus_count=0,
                time_remaining=self.settings.focus_duration_seconds,
            )
            logger.info("Plan finished")

        return finished if finished is not Phase.IDLE else None

    def _resume_locked(self) -> None:
        if not self._state.is_running:
            self._start_ticking()

    def _start_ticking(self) -> None:
        self._tick_generation += 1
        generation = self._tick_generation
        self._state = replace(self._state, is_running=True)
        self.scheduler.schedule(TICK_INTERVAL, lambda: self._scheduled_tick(generation))

    def _stop_ticking(self) -> None:
        self._tick_generation += 1
        self._state = replace(self._state, is_running=False)
        self.scheduler.cancel()

    def _scheduled_tick(self, generation: int) -> None:
        # A tick from a cancelled timer may still be waiting on the lock.
        self._advance(generation)

    def _notify(self) -> None:
        self.state_changed.emit(self._state)
