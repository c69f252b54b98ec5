from __future__ import annotations
import logging
from typing import Optional

try:
    import can
except Exception:
    can = None

from .interface import ReadResult
from sniff_backend import metrics

logger = logging.getLogger(__name__)


def format_message(msg, tag: str = 'CAN') -> str:
    """Render a python-can Message in the serial wire text form."""
    data = ' '.join(f"{b:02X}" for b in bytes(msg.data))
    return f"{tag}:{msg.arbitration_id:X}:{data}"


class PythonCanLineTransport:
    """Wrapper around a python-can Bus that implements the LineTransport protocol.

    Received messages are rendered to the same text lines a serial sniffer
    would print, so the rest of the pipeline (transcript, parser) is shared.
    """

    def __init__(self, channel: str = 'virtual', bitrate: Optional[int] = None, interface: Optional[str] = None,
                 timeout: float = 0.1):
        self.channel = channel
        self.bitrate = bitrate
        self.interface = interface
        self.timeout = timeout
        self._bus: Optional[object] = None

    def open(self) -> None:
        if can is None:
            raise RuntimeError('python-can library not available')
        kwargs = {}
        if self.bitrate is not None:
            kwargs['bitrate'] = int(self.bitrate)
        if self.interface:
            kwargs['interface'] = self.interface
        self._bus = can.Bus(channel=self.channel, **kwargs)
        logger.debug(f"Opened python-can Bus: interface={self.interface}, channel={self.channel}")

    def close(self) -> None:
        bus = self._bus
        self._bus = None
        if bus is not None:
            try:
                bus.shutdown()
            except Exception as e:
                logger.warning(f"Error shutting down python-can Bus: {e}")

    @property
    def is_open(self) -> bool:
        return self._bus is not None

    def read_line(self, timeout: Optional[float] = None) -> ReadResult:
        bus = self._bus
        if bus is None:
            return ReadResult.no_data()
        try:
            msg = bus.recv(self.timeout if timeout is None else timeout)
        except (can.CanError, OSError, ValueError) as e:
            if self._bus is None:
                return ReadResult.no_data()
            metrics.inc("link_failures")
            return ReadResult.failure(e)
        if msg is None:
            return ReadResult.no_data()
        metrics.inc("lines_read")
        return ReadResult.data(format_message(msg))
