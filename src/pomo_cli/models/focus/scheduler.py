"""Repeating tick sources for the session state machine."""

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable

logger = logging.getLogger(__name__)

TICK_INTERVAL = 1.0  # seconds


class Scheduler(ABC):
    """Port for a single repeating timer.

    ``schedule`` always replaces the existing timer, so at most one is active.
    ``cancel`` is idempotent and returns at once; a callback that was already
    running when the timer was cancelled may still finish.
    """

    @abstractmethod
    def schedule(self, interval: float, callback: Callable[[], None]) -> None:
        """Call ``callback`` every ``interval`` seconds until cancelled."""

    @abstractmethod
    def cancel(self) -> None:
        """Stop the active timer, if any."""

    @property
    @abstractmethod
    def active(self) -> bool:
        """Whether a timer is currently scheduled."""


class ThreadingScheduler(Scheduler):
    """Scheduler backed by a daemon thread waiting on an Event."""

    def __init__(self):
        self._lock = threading.Lock()
        self._stop_event: threading.Event | None = None

    @property
    def active(self) -> bool:
        with self._lock:
            return self._stop_event is not None and not self._stop_event.is_set()

    def schedule(self, interval: float, callback: Callable[[], None]) -> None:
        self.cancel()
        stop_event = threading.Event()
        thread = threading.Thread(
            target=self._run_loop,
            args=(interval, callback, stop_event),
            name="pomo-ticker",
            daemon=True,
        )
        with self._lock:
            self._stop_event = stop_event
        thread.start()
        logger.debug("Scheduled tick every %.1fs", interval)

    def cancel(self) -> None:
        """Signal the ticker thread to exit. Does not wait for it."""
        with self._lock:
            stop_event, self._stop_event = self._stop_event, None
        if stop_event is None:
            return
        stop_event.set()
        logger.debug("Cancelled tick")

    @staticmethod
    def _run_loop(
        interval: float, callback: Callable[[], None], stop_event: threading.Event
    ) -> None:
        while not stop_event.wait(interval):
            try:
                callback()
            except Exception:
                logger.exception("Timer tick failed")
