"""Shared test fixtures and configuration.

Provides a manual tick source, a fixed clock and filesystem isolation so
tests never sleep and never touch real platform directories.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from unittest.mock import patch

import pytest

from pomo_cli.models.focus.history import HistoryStore
from pomo_cli.models.focus.scheduler import Scheduler
from pomo_cli.models.focus.state import SessionStateMachine

# Saturday, mid-day, local zone
NOW = datetime(2024, 6, 15, 12, 0).astimezone()


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class ManualScheduler(Scheduler):
    """Scheduler whose ticks are fired explicitly by the test."""

    def __init__(self):
        self.interval: float | None = None
        self.callback: Callable[[], None] | None = None
        self.schedule_count = 0
        self.cancel_count = 0

    @property
    def active(self) -> bool:
        return self.callback is not None

    def schedule(self, interval: float, callback: Callable[[], None]) -> None:
        self.cancel()
        self.interval = interval
        self.callback = callback
        self.schedule_count += 1

    def cancel(self) -> None:
        if self.callback is not None:
            self.cancel_count += 1
        self.callback = None

    def fire(self, times: int = 1) -> None:
        """Deliver up to ``times`` ticks; stops early once cancelled."""
        for _ in range(times):
            if self.callback is None:
                return
            self.callback()


class FakeClock:
    """Callable clock returning a settable time."""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@dataclass
class FakeSettings:
    """Plain settings provider; allows zero durations unlike TimerSettings."""

    focus_duration_seconds: float = 3
    break_duration_seconds: float = 2
    target_rounds: int = 2
    auto_start_break: bool = False


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def history_path(tmp_path: Path) -> Path:
    return tmp_path / "history.json"


@pytest.fixture()
def store(history_path: Path, clock: FakeClock) -> HistoryStore:
    """HistoryStore backed by a tmp file and the fake clock."""
    return HistoryStore(history_path, clock=clock)


@pytest.fixture()
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture()
def settings() -> FakeSettings:
    return FakeSettings()


@pytest.fixture()
def machine(
    settings: FakeSettings, store: HistoryStore, scheduler: ManualScheduler
) -> SessionStateMachine:
    return SessionStateMachine(settings, store, scheduler)


@pytest.fixture()
def isolated_dirs(tmp_path: Path):
    """Point config, data and log directories at *tmp_path*.

    Also clears the lru_cache so each test gets a fresh service instance.
    """
    import pomo_cli.utils.logger as logger_mod
    from pomo_cli.services.config_service import get_config_service

    tmpdir = str(tmp_path)
    app_logger = logging.getLogger("pomo_cli")
    original_handlers = list(app_logger.handlers)
    app_logger.handlers.clear()

    get_config_service.cache_clear()
    with patch("pomo_cli.services.config_service.user_config_dir", return_value=tmpdir):
        with patch("pomo_cli.services.config_service.user_data_dir", return_value=tmpdir):
            with patch("pomo_cli.utils.logger.user_log_dir", return_value=tmpdir):
                original = logger_mod._logger
                logger_mod._logger = None
                yield tmp_path
                logger_mod._logger = original
    get_config_service.cache_clear()

    for handler in app_logger.handlers:
        handler.close()
    app_logger.handlers[:] = original_handlers
