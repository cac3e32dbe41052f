"""Synchronous publish/subscribe events."""

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class Event:
    """A list of listeners called in subscription order.

    A listener that raises is logged and skipped; remaining listeners still run.
    """

    def __init__(self, name: str = "event"):
        self.name = name
        self._listeners: list[Callable] = []

    def subscribe(self, listener: Callable) -> Callable[[], None]:
        """Add a listener. Returns a function that removes it again."""
        if not callable(listener):
            raise ValueError("Listener must be callable")
        self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: Callable) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def emit(self, *args, **kwargs) -> None:
        for listener in list(self._listeners):
            try:
                listener(*args, **kwargs)
            except Exception:
                logger.exception("Error in %s listener %r", self.name, listener)

    def __len__(self) -> int:
        return len(self._listeners)
