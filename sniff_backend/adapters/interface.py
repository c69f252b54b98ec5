from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol


class LinkStatus(Enum):
    """Outcome of a single read attempt on a line transport."""
    DATA = "data"
    NO_DATA = "no_data"
    FAILURE = "failure"


@dataclass(frozen=True)
class ReadResult:
    """Result of LineTransport.read_line().

    Exactly one of `line` (for DATA) or `error` (for FAILURE) is set;
    NO_DATA carries neither.
    """
    status: LinkStatus
    line: Optional[str] = None
    error: Optional[BaseException] = None

    @classmethod
    def data(cls, line: str) -> "ReadResult":
        return cls(LinkStatus.DATA, line=line)

    @classmethod
    def no_data(cls) -> "ReadResult":
        return cls(LinkStatus.NO_DATA)

    @classmethod
    def failure(cls, error: BaseException) -> "ReadResult":
        return cls(LinkStatus.FAILURE, error=error)


class LineTransport(Protocol):
    """Interface that every text-line transport implements."""

    def open(self) -> None:
        ...

    def close(self) -> None:
        """Release the link. Must unblock a pending read_line()."""
        ...

    def read_line(self, timeout: Optional[float] = None) -> ReadResult:
        """Read one line without its terminator."""
        ...
