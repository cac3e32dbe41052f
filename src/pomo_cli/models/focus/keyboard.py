"""Non-blocking keyboard input for timer controls."""

import select
import sys
from typing import Optional

try:
    import termios
    import tty
except ImportError:  # Windows
    termios = None
    tty = None


class KeyboardHandler:
    """Reads single key presses from a terminal without blocking."""

    def __init__(self):
        self.fd: int | None = None
        self.old_settings = None
        self._setup()

    def _setup(self):
        """Put the terminal in cbreak mode when stdin is a tty."""
        if termios is None:
            return
        try:
            self.fd = sys.stdin.fileno()
            self.old_settings = termios.tcgetattr(self.fd)
            tty.setcbreak(self.fd)
        except (OSError, ValueError, termios.error):
            # Not a terminal (piped input, test runner)
            self.fd = None
            self.old_settings = None

    def get_key(self) -> Optional[str]:
        """
        Get a single keypress without blocking.

        Returns the lower-cased key or None if no key is waiting.
        """
        if self.fd is None:
            return None
        if select.select([sys.stdin], [], [], 0)[0]:
            return sys.stdin.read(1).lower()
        return None

    def stop(self):
        """Restore terminal settings."""
        if self.old_settings is not None and self.fd is not None:
            termios.tcsetattr(self.fd, termios.TCSADRAIN, self.old_settings)
            self.old_settings = None
