"""
Parameter Service for decoding configured parameters from CAN frames.

A parameter names a set of payload offsets on one identifier and a scale
factor. Frames too short for the configured offsets are not an error: the
parameter simply has no reading yet.
"""
import logging
from typing import Dict, Iterable, List, Optional

from sniff_console.models.can_frame import CanFrame
from sniff_console.models.parameter import Parameter, ParameterReading

logger = logging.getLogger(__name__)


def decode_raw(frame: CanFrame, parameter: Parameter) -> Optional[int]:
    """Concatenate the configured payload bytes big-endian.
    
    Returns:
        Raw unsigned integer, or None if any offset is outside the payload
    """
    length = len(frame.data)
    raw = 0
    for index in parameter.byte_indices:
        if index < 0 or index >= length:
            return None
        raw = (raw << 8) | frame.data[index]
    return raw


def decode(frame: CanFrame, parameter: Parameter) -> Optional[float]:
    """Decode a scaled reading (raw * coefficient), or None if not applicable."""
    raw = decode_raw(frame, parameter)
    if raw is None:
        return None
    return raw * parameter.coefficient


class ParameterService:
    """Service matching frames against configured parameters.
    
    Attributes:
        parameters: Configured parameters, in display order
        _by_address: Parameters grouped by canonical address text
    """
    
    def __init__(self, parameters: Optional[Iterable[Parameter]] = None):
        self.parameters: List[Parameter] = list(parameters or [])
        self._by_address: Dict[str, List[Parameter]] = {}
        for parameter in self.parameters:
            self._by_address.setdefault(parameter.address, []).append(parameter)
        if self.parameters:
            logger.info(f"ParameterService: {len(self.parameters)} parameter(s) configured")
    
    @property
    def names(self) -> List[str]:
        return [p.name for p in self.parameters]
    
    def __bool__(self) -> bool:
        return bool(self.parameters)
    
    def decode_frame(self, frame: CanFrame) -> List[ParameterReading]:
        """Decode every parameter configured for the frame's identifier.
        
        Parameters that do not fit the payload are skipped silently.
        """
        matching = self._by_address.get(frame.id_hex)
        if not matching:
            return []
        readings = []
        for parameter in matching:
            raw = decode_raw(frame, parameter)
            if raw is None:
                continue
            readings.append(ParameterReading(
                name=parameter.name,
                value=raw * parameter.coefficient,
                raw_value=raw,
                address=parameter.address,
                timestamp=frame.timestamp,
            ))
        return readings
