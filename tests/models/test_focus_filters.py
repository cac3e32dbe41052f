"""Tests for named date ranges."""

import time
from datetime import datetime, timedelta

import pytest
from conftest import NOW

from pomo_cli.models.focus.filters import (
    EARLIEST,
    DateRange,
    DateRangeFilter,
    shift_months,
    start_of_week,
)


def at(year, month, day, hour=0, minute=0):
    """Aware local time for a wall-clock reading."""
    return datetime(year, month, day, hour, minute).astimezone()


# ---------------------------------------------------------------------------
# resolve()
# ---------------------------------------------------------------------------


class TestResolve:
    def test_today(self):
        r = DateRangeFilter.TODAY.resolve(NOW)
        assert r.start == at(2024, 6, 15)
        assert r.end == NOW

    def test_this_week_starts_monday(self):
        r = DateRangeFilter.THIS_WEEK.resolve(NOW)
        assert r.start == at(2024, 6, 10)
        assert r.start.weekday() == 0
        assert r.end == NOW

    def test_last_week_is_previous_full_week(self):
        r = DateRangeFilter.LAST_WEEK.resolve(NOW)
        assert r.start == at(2024, 6, 3)
        assert r.end == at(2024, 6, 10)

    def test_this_month(self):
        r = DateRangeFilter.THIS_MONTH.resolve(NOW)
        assert r.start == at(2024, 6, 1)
        assert r.end == NOW

    def test_last_month(self):
        r = DateRangeFilter.LAST_MONTH.resolve(NOW)
        assert r.start == at(2024, 5, 1)
        assert r.end == at(2024, 6, 1)

    def test_last_month_across_year_boundary(self):
        r = DateRangeFilter.LAST_MONTH.resolve(at(2024, 1, 20, 9))
        assert r.start == at(2023, 12, 1)
        assert r.end == at(2024, 1, 1)

    def test_last_6_months(self):
        r = DateRangeFilter.LAST_6_MONTHS.resolve(NOW)
        assert r.start == at(2023, 12, 15, 12)
        assert r.end == NOW

    def test_last_12_months(self):
        r = DateRangeFilter.LAST_12_MONTHS.resolve(NOW)
        assert r.start == at(2023, 6, 15, 12)
        assert r.end == NOW

    def test_all_time(self):
        r = DateRangeFilter.ALL_TIME.resolve(NOW)
        assert r.start == EARLIEST
        assert r.end == NOW

    def test_naive_now_is_treated_as_local(self):
        r = DateRangeFilter.TODAY.resolve(datetime(2024, 6, 15, 12, 0))
        assert r.start.tzinfo is not None

    def test_default_now_is_current_time(self):
        r = DateRangeFilter.ALL_TIME.resolve()
        assert abs(datetime.now().astimezone() - r.end) < timedelta(minutes=1)


class TestDateRange:
    def test_contains_is_inclusive(self):
        r = DateRange(at(2024, 6, 1), at(2024, 6, 2))
        assert r.contains(at(2024, 6, 1))
        assert r.contains(at(2024, 6, 2))
        assert not r.contains(at(2024, 6, 2) + timedelta(seconds=1))
        assert not r.contains(at(2024, 5, 31, 23, 59))

    def test_whole_days(self):
        assert DateRangeFilter.LAST_WEEK.resolve(NOW).whole_days == 7
        assert DateRangeFilter.TODAY.resolve(NOW).whole_days == 0


# ---------------------------------------------------------------------------
# Calendar helpers
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "start, months, expected",
    [
        ((2024, 3, 31), -1, (2024, 2, 29)),
        ((2023, 3, 31), -1, (2023, 2, 28)),
        ((2024, 1, 31), 1, (2024, 2, 29)),
        ((2024, 6, 15), -12, (2023, 6, 15)),
        ((2024, 2, 10), -3, (2023, 11, 10)),
    ],
)
def test_shift_months_clamps_day(start, months, expected):
    assert shift_months(at(*start), months) == at(*expected)


def test_start_of_week_on_monday_is_same_day():
    monday = at(2024, 6, 10, 18)
    assert start_of_week(monday) == at(2024, 6, 10)


def test_start_of_week_on_sunday():
    assert start_of_week(at(2024, 6, 16, 8)) == at(2024, 6, 10)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "text, expected",
    [
        ("today", DateRangeFilter.TODAY),
        ("this-week", DateRangeFilter.THIS_WEEK),
        ("This Week", DateRangeFilter.THIS_WEEK),
        ("LAST_MONTH", DateRangeFilter.LAST_MONTH),
        ("last-6-months", DateRangeFilter.LAST_6_MONTHS),
        ("all", DateRangeFilter.ALL_TIME),
        ("  All Time ", DateRangeFilter.ALL_TIME),
        ("week", DateRangeFilter.THIS_WEEK),
        ("month", DateRangeFilter.THIS_MONTH),
    ],
)
def test_from_label(text, expected):
    assert DateRangeFilter.from_label(text) is expected


def test_from_label_unknown():
    with pytest.raises(ValueError, match="Unknown date range"):
        DateRangeFilter.from_label("fortnight")


def test_labels_and_slugs():
    assert DateRangeFilter.LAST_12_MONTHS.label == "Last 12 Months"
    assert DateRangeFilter.LAST_12_MONTHS.slug == "last-12-months"
    assert DateRangeFilter.ALL_TIME.slug == "all-time"


# ---------------------------------------------------------------------------
# Daylight saving transitions
# ---------------------------------------------------------------------------


@pytest.fixture()
def us_eastern(monkeypatch):
    """Pin the process zone to US Eastern with its DST rules."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    monkeypatch.setenv("TZ", "EST5EDT,M3.2.0,M11.1.0")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


class TestDaylightSaving:
    """2024-03-10 is the spring-forward Sunday: midnight is EST, noon is EDT."""

    def test_today_starts_at_local_midnight(self, us_eastern):
        now = datetime(2024, 3, 10, 12, 0).astimezone()
        r = DateRangeFilter.TODAY.resolve(now)

        assert now.utcoffset() == timedelta(hours=-4)
        assert r.start.utcoffset() == timedelta(hours=-5)
        assert r.start.replace(tzinfo=None) == datetime(2024, 3, 10)

    def test_previous_evening_is_not_today(self, us_eastern):
        now = datetime(2024, 3, 10, 12, 0).astimezone()
        late_yesterday = datetime(2024, 3, 9, 23, 30).astimezone()

        assert not DateRangeFilter.TODAY.resolve(now).contains(late_yesterday)

    def test_week_and_month_start_before_transition(self, us_eastern):
        now = datetime(2024, 3, 12, 9, 0).astimezone()

        week = DateRangeFilter.THIS_WEEK.resolve(now)
        month = DateRangeFilter.THIS_MONTH.resolve(now)

        assert week.start.replace(tzinfo=None) == datetime(2024, 3, 11)
        assert week.start.utcoffset() == timedelta(hours=-4)
        assert month.start.replace(tzinfo=None) == datetime(2024, 3, 1)
        assert month.start.utcoffset() == timedelta(hours=-5)
        assert not month.contains(datetime(2024, 2, 29, 23, 30).astimezone())

    def test_last_week_spans_transition(self, us_eastern):
        now = datetime(2024, 3, 12, 9, 0).astimezone()

        r = DateRangeFilter.LAST_WEEK.resolve(now)

        assert r.start.replace(tzinfo=None) == datetime(2024, 3, 4)
        assert r.end.replace(tzinfo=None) == datetime(2024, 3, 11)
        assert r.whole_days == 7

    def test_month_shift_keeps_wall_clock(self, us_eastern):
        now = datetime(2024, 6, 15, 12, 0).astimezone()

        r = DateRangeFilter.LAST_6_MONTHS.resolve(now)

        assert r.start.replace(tzinfo=None) == datetime(2023, 12, 15, 12, 0)
        assert r.start.utcoffset() == timedelta(hours=-5)
