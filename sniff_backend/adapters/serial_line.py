"""Line transport over a serial port using pyserial.

The device on the other end prints one CAN frame per line in the text form
``<tag>:<id-hex>:<byte-hex> <byte-hex> ...``. Any URL accepted by
``serial.serial_for_url`` works as the port, so ``loop://`` can be used in
tests without hardware.
"""
from __future__ import annotations

import logging
import threading
from typing import Optional

try:
    import serial
except Exception:  # pragma: no cover - import failure handled at runtime
    serial = None

from .interface import ReadResult
from sniff_backend import metrics

logger = logging.getLogger(__name__)


class SerialLineTransport:
    """Transport reading newline-terminated text from a serial port.

    Example:
      t = SerialLineTransport(port='COM11', baudrate=115200)
      t.open()
      r = t.read_line()
      t.close()
    """

    def __init__(self, port: str, baudrate: int = 115200, timeout: float = 0.1, encoding: str = 'utf-8'):
        self.port = port
        self.baudrate = baudrate
        self.timeout = timeout
        self.encoding = encoding
        self._ser: Optional["serial.Serial"] = None
        self._closing = threading.Event()
        self._pending = bytearray()

    def open(self) -> None:
        if serial is None:
            raise RuntimeError("pyserial is not installed")
        self._closing.clear()
        self._pending.clear()
        self._ser = serial.serial_for_url(self.port, baudrate=self.baudrate, timeout=self.timeout)
        logger.debug(f"Opened serial port {self.port} at {self.baudrate} baud")

    def close(self) -> None:
        self._closing.set()
        ser = self._ser
        self._ser = None
        self._pending.clear()
        if ser is not None:
            try:
                ser.close()
            except Exception as e:
                logger.warning(f"Error closing serial port {self.port}: {e}")

    @property
    def is_open(self) -> bool:
        return self._ser is not None

    def write_line(self, line: str) -> None:
        """Write one line to the port (used by loopback tests and smoke scripts)."""
        if self._ser is None:
            raise RuntimeError("Serial port not open")
        self._ser.write((line + '\n').encode(self.encoding))

    def read_line(self, timeout: Optional[float] = None) -> ReadResult:
        """Return the next complete line.

        A read that times out part way through a line keeps the partial
        bytes and reports NO_DATA; the line is delivered once its newline
        arrives.
        """
        ser = self._ser
        if ser is None or self._closing.is_set():
            return ReadResult.no_data()
        try:
            if timeout is None:
                raw = ser.readline()
            else:
                ser.timeout = timeout
                try:
                    raw = ser.readline()
                finally:
                    ser.timeout = self.timeout
        except (serial.SerialException, OSError, TypeError, AttributeError) as e:
            # A read interrupted by close() from another thread is not an error.
            if self._closing.is_set():
                return ReadResult.no_data()
            metrics.inc("link_failures")
            return ReadResult.failure(e)
        if raw:
            self._pending += raw
        if not self._pending.endswith(b'\n'):
            return ReadResult.no_data()
        line = bytes(self._pending)
        self._pending.clear()
        metrics.inc("lines_read")
        return ReadResult.data(line.decode(self.encoding, errors='ignore').rstrip('\r\n'))
