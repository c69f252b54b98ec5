from .interface import LineTransport, LinkStatus, ReadResult
from .sim import SimLineTransport
from .serial_line import SerialLineTransport
from .python_can_adapter import PythonCanLineTransport

__all__ = [
    "LineTransport",
    "LinkStatus",
    "ReadResult",
    "SimLineTransport",
    "SerialLineTransport",
    "PythonCanLineTransport",
]
