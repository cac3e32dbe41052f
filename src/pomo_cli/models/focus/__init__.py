"""Focus mode - Pomodoro state machine and session history."""

from .analytics import DailyTotal, FocusAnalytics
from .events import Event
from .filters import DateRange, DateRangeFilter
from .history import HistoryStore, SessionKind, SessionRecord
from .plan import Phase, SessionPlan, is_focus_position, plan_length
from .scheduler import Scheduler, ThreadingScheduler
from .state import SessionStateMachine, TimerState

__all__ = [
    "DailyTotal",
    "DateRange",
    "DateRangeFilter",
    "Event",
    "FocusAnalytics",
    "HistoryStore",
    "Phase",
    "Scheduler",
    "SessionKind",
    "SessionPlan",
    "SessionRecord",
    "SessionStateMachine",
    "ThreadingScheduler",
    "TimerState",
    "is_focus_position",
    "plan_length",
]
