import queue
import threading
from typing import Iterable, Optional
from .interface import ReadResult
from sniff_backend import metrics

_CLOSE = object()


class SimLineTransport:
    """A simple in-memory line transport for testing and demos.

    Usage:
      t = SimLineTransport()
      t.open()
      t.feed("CAN:17C:00 00 01 F4")
      r = t.read_line(timeout=1.0)
      t.close()
    """

    def __init__(self, lines: Optional[Iterable[str]] = None) -> None:
        self._q: queue.Queue = queue.Queue()
        self._running = False
        self._lock = threading.Lock()
        for line in lines or ():
            self._q.put(line)

    def open(self) -> None:
        with self._lock:
            self._running = True

    def close(self) -> None:
        with self._lock:
            self._running = False
        # wake any reader blocked in read_line()
        self._q.put(_CLOSE)

    @property
    def is_open(self) -> bool:
        with self._lock:
            return self._running

    def feed(self, line: str) -> None:
        """Enqueue a raw line as if it had arrived on the link."""
        self._q.put(line)
        metrics.inc("sim_feed")

    def read_line(self, timeout: Optional[float] = None) -> ReadResult:
        if not self.is_open:
            return ReadResult.no_data()
        try:
            item = self._q.get(timeout=timeout)
        except queue.Empty:
            return ReadResult.no_data()
        if item is _CLOSE:
            return ReadResult.no_data()
        metrics.inc("lines_read")
        return ReadResult.data(item)
