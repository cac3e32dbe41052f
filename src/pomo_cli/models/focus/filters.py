"""Named date ranges used by history queries and reports."""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from enum import Enum

EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class DateRange:
    """Closed ``[start, end]`` instant pair."""

    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end

    @property
    def whole_days(self) -> int:
        """Calendar days between the bounds, counted on the local wall clock."""
        if self.start == EARLIEST:
            return (self.end - self.start).days
        return (_local_wall_time(self.end) - _local_wall_time(self.start)).days


def local_now() -> datetime:
    """Current time as an aware datetime in the local zone."""
    return datetime.now().astimezone()


def _local_wall_time(moment: datetime) -> datetime:
    """Naive local wall-clock time of ``moment``."""
    return moment.astimezone().replace(tzinfo=None)


def _local_midnight(day: date) -> datetime:
    """00:00 of ``day`` at the local UTC offset in effect on that day."""
    return datetime(day.year, day.month, day.day).astimezone()


def start_of_day(moment: datetime) -> datetime:
    return _local_midnight(_local_wall_time(moment).date())


def start_of_week(moment: datetime) -> datetime:
    """Monday 00:00 of the week containing ``moment``."""
    today = _local_wall_time(moment).date()
    return _local_midnight(today - timedelta(days=today.weekday()))


def start_of_month(moment: datetime) -> datetime:
    return _local_midnight(_local_wall_time(moment).date().replace(day=1))


def shift_months(moment: datetime, months: int) -> datetime:
    """Move ``moment`` by whole calendar months of local time, clamping the day."""
    wall = _local_wall_time(moment)
    month_index = wall.year * 12 + (wall.month - 1) + months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(wall.day, calendar.monthrange(year, month)[1])
    return wall.replace(year=year, month=month, day=day).astimezone()


class DateRangeFilter(Enum):
    """Report ranges, anchored to the moment they are resolved."""

    TODAY = "Today"
    THIS_WEEK = "This Week"
    LAST_WEEK = "Last Week"
    THIS_MONTH = "This Month"
    LAST_MONTH = "Last Month"
    LAST_6_MONTHS = "Last 6 Months"
    LAST_12_MONTHS = "Last 12 Months"
    ALL_TIME = "All Time"

    @property
    def label(self) -> str:
        return self.value

    @property
    def slug(self) -> str:
        """CLI spelling, e.g. ``this-week``."""
        return self.value.lower().replace(" ", "-")

    @classmethod
    def from_label(cls, text: str) -> DateRangeFilter:
        """Parse ``today``, ``this-week``, ``This Week``, ``ALL_TIME`` ..."""
        key = text.strip().lower().replace("_", "-").replace(" ", "-")
        aliases = {"all": cls.ALL_TIME, "week": cls.THIS_WEEK, "month": cls.THIS_MONTH}
        if key in aliases:
            return aliases[key]
        for option in cls:
            if option.slug == key:
                return option
        choices = ", ".join(option.slug for option in cls)
        raise ValueError(f"Unknown date range '{text}'. Choose from: {choices}")

    def resolve(self, now: datetime | None = None) -> DateRange:
        """Compute the instant range for this option relative to ``now``."""
        if now is None:
            now = local_now()
        elif now.tzinfo is None:
            now = now.astimezone()

        if self is DateRangeFilter.TODAY:
            return DateRange(start_of_day(now), now)
        if self is DateRangeFilter.THIS_WEEK:
            return DateRange(start_of_week(now), now)
        if self is DateRangeFilter.LAST_WEEK:
            this_week = start_of_week(now)
            return DateRange(_local_midnight(this_week.date() - timedelta(weeks=1)), this_week)
        if self is DateRangeFilter.THIS_MONTH:
            return DateRange(start_of_month(now), now)
        if self is DateRangeFilter.LAST_MONTH:
            this_month = start_of_month(now)
            return DateRange(shift_months(this_month, -1), this_month)
        if self is DateRangeFilter.LAST_6_MONTHS:
            return DateRange(shift_months(now, -6), now)
        if self is DateRangeFilter.LAST_12_MONTHS:
            return DateRange(shift_months(now, -12), now)
        return DateRange(EARLIEST, now)
