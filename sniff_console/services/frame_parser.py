"""
Frame parser for sniffer text lines.

Each line has three colon-separated fields: an ignored tag, the CAN
identifier in hex, and the payload as space-separated hex bytes:

    CAN:17C:00 00 01 F4

Baseline exports use the same shape (tag ``ID``) so they can be read back.
"""
import time
import logging
from typing import Optional

from sniff_console.exceptions import FrameParseError
from sniff_console.models.can_frame import CanFrame
from sniff_console.utils.regex_patterns import REGEX_HEX_ID, REGEX_HEX_BYTE
from sniff_backend import metrics

logger = logging.getLogger(__name__)

EXPORT_TAG = 'ID'


def parse_line(line: str, timestamp: Optional[float] = None) -> CanFrame:
    """Parse one raw text line into a CanFrame.
    
    Args:
        line: Raw line, with or without its line terminator
        timestamp: Arrival time to stamp on the frame (defaults to time.time())
        
    Returns:
        The parsed frame
        
    Raises:
        FrameParseError: If the field count is not 3, the identifier is not
            hex, or any byte token is not a hex byte
    """
    parts = line.strip().split(':')
    if len(parts) != 3:
        raise FrameParseError(f"Expected 3 fields, got {len(parts)}: {line!r}", line=line)
    
    id_text = parts[1].strip()
    if not REGEX_HEX_ID.match(id_text):
        raise FrameParseError(f"Invalid identifier {id_text!r}: {line!r}", line=line)
    
    data = bytearray()
    for token in parts[2].split():
        if not REGEX_HEX_BYTE.match(token):
            raise FrameParseError(f"Invalid byte {token!r}: {line!r}", line=line)
        data.append(int(token, 16))
    
    return CanFrame(
        can_id=int(id_text, 16),
        data=bytes(data),
        timestamp=time.time() if timestamp is None else timestamp,
    )


def try_parse_line(line: str, timestamp: Optional[float] = None) -> Optional[CanFrame]:
    """Parse a line, logging and counting failures instead of raising.
    
    Returns:
        The parsed frame, or None if the line is malformed
    """
    try:
        return parse_line(line, timestamp)
    except FrameParseError as e:
        metrics.inc("parse_failures")
        logger.warning(f"Failed to parse frame: {e}")
        return None


def format_frame(frame: CanFrame, tag: str = EXPORT_TAG) -> str:
    """Render a frame as an export line that parse_line() reads back."""
    return f"{tag}:{frame.id_hex}:{frame.data_hex}"
