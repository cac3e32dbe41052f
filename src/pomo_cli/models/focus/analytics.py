"""Analytics engine for focus history."""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any

from .filters import DateRangeFilter
from .history import HistoryStore, SessionKind


@dataclass(frozen=True)
class DailyTotal:
    """Focus time and session count for one calendar day."""

    day: date
    duration_seconds: float
    count: int


class FocusAnalytics:
    """Compute statistics from focus session history.

    Every value is recomputed from the store on each call, relative to the
    store clock, so results always reflect the current moment.
    """

    def __init__(self, history: HistoryStore):
        """Initialize analytics engine."""
        self.history = history

    def _focus_days(self) -> set[date]:
        """Distinct local days with at least one focus record, over all history."""
        return {
            r.local_day for r in self.history.records if r.kind is SessionKind.FOCUS
        }

    def total_focus_time(self, option: DateRangeFilter) -> float:
        return sum(r.duration_seconds for r in self.history.focus_sessions(option))

    def completed_count(self, option: DateRangeFilter) -> int:
        return len(self.history.focus_sessions(option))

    def average_session_length(self, option: DateRangeFilter) -> float:
        sessions = self.history.focus_sessions(option)
        if not sessions:
            return 0.0
        return sum(r.duration_seconds for r in sessions) / len(sessions)

    def average_per_day(self, option: DateRangeFilter) -> float:
        """Focus seconds per whole day of the resolved range (at least one day)."""
        date_range = option.resolve(self.history.clock())
        return self.total_focus_time(option) / max(1, date_range.whole_days)

    def daily_totals(self, option: DateRangeFilter) -> list[DailyTotal]:
        """
        Group focus sessions by local calendar day.

        Returns:
            One entry per day with sessions, ascending by day
        """
        buckets: dict[date, tuple[float, int]] = {}
        for record in self.history.focus_sessions(option):
            duration, count = buckets.get(record.local_day, (0.0, 0))
            buckets[record.local_day] = (duration + record.duration_seconds, count + 1)

        return [
            DailyTotal(day=day, duration_seconds=duration, count=count)
            for day, (duration, count) in sorted(buckets.items())
        ]

    def current_streak(self) -> int:
        """
        Count consecutive days with focus sessions, walking back from today.

        Today may have no sessions yet without breaking the streak; in that
        case counting starts from yesterday.
        """
        days = self._focus_days()
        check = self.history.clock().astimezone().date()
        if check not in days:
            check -= timedelta(days=1)

        streak = 0
        while check in days:
            streak += 1
            check -= timedelta(days=1)
        return streak

    def best_streak(self) -> int:
        """Longest run of consecutive calendar days with focus sessions."""
        days = sorted(self._focus_days())
        if not days:
            return 0

        longest = 1
        run = 1
        for previous, current in zip(days, days[1:]):
            if (current - previous).days == 1:
                run += 1
                longest = max(longest, run)
            else:
                run = 1
        return longest

    def summary(self, option: DateRangeFilter) -> dict[str, Any]:
        """
        Collect the report values for a range.

        Args:
            option: Date range to report on

        Returns:
            Dict with totals, averages, streaks and the resolved range
        """
        date_range = option.resolve(self.history.clock())
        return {
            "range": option.label,
            "start": date_range.start,
            "end": date_range.end,
            "total_focus_seconds": self.total_focus_time(option),
            "completed_sessions": self.completed_count(option),
            "average_per_day_seconds": self.average_per_day(option),
            "average_session_seconds": self.average_session_length(option),
            "current_streak": self.current_streak(),
            "best_streak": self.best_streak(),
        }
