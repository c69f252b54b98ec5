"""
Non-blocking single-key polling for the operator command loop.

Uses msvcrt on Windows and termios/select on POSIX terminals. When stdin
is not a terminal no keys are ever reported.
"""
import os
import sys
import logging
from typing import Optional

logger = logging.getLogger(__name__)

if os.name == 'nt':  # pragma: no cover - platform specific
    import msvcrt
    termios = tty = select = None
else:
    msvcrt = None
    import select
    import termios
    import tty


class KeyPoller:
    """Context manager reporting single key presses without blocking.

    Usage:
      with KeyPoller() as keys:
          key = keys.poll()
    """

    def __init__(self, stream=None):
        self.stream = stream or sys.stdin
        self._saved_attrs = None
        self._fd: Optional[int] = None

    def __enter__(self) -> 'KeyPoller':
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    @property
    def interactive(self) -> bool:
        try:
            return self.stream.isatty()
        except (AttributeError, ValueError):
            return False

    def start(self) -> None:
        if msvcrt is not None or not self.interactive:
            return
        self._fd = self.stream.fileno()
        self._saved_attrs = termios.tcgetattr(self._fd)
        tty.setcbreak(self._fd)

    def stop(self) -> None:
        if self._fd is not None and self._saved_attrs is not None:
            termios.tcsetattr(self._fd, termios.TCSADRAIN, self._saved_attrs)
        self._fd = None
        self._saved_attrs = None

    def poll(self) -> Optional[str]:
        """Return a pressed key, or None if no key is waiting."""
        if msvcrt is not None:
            if msvcrt.kbhit():
                return msvcrt.getwch()
            return None
        if self._fd is None:
            return None
        ready, _, _ = select.select([self._fd], [], [], 0)
        if not ready:
            return None
        ch = os.read(self._fd, 1)
        return ch.decode('utf-8', errors='ignore') or None
