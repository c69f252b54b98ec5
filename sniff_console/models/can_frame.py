"""
CAN Frame model for representing parsed CAN bus frames.
"""
from dataclasses import dataclass

from sniff_console.exceptions import ByteIndexError


@dataclass(frozen=True)
class CanFrame:
    """Represents one parsed CAN frame with ID, payload and arrival time.
    
    Frames are immutable once constructed; buffers and baselines share the
    same instances safely.
    
    Attributes:
        can_id: CAN arbitration identifier (non-negative)
        data: Payload bytes (0-8 in practice, not enforced)
        timestamp: Arrival time in seconds, assigned at parse time
    """
    can_id: int
    data: bytes
    timestamp: float = 0.0
    
    def __post_init__(self):
        """Validate frame fields after initialization."""
        if not isinstance(self.data, bytes):
            raise TypeError(f"data must be bytes, got {type(self.data)}")
        if self.can_id < 0:
            raise ValueError(f"CAN ID must be non-negative, got {self.can_id}")
    
    @property
    def whole_value(self) -> int:
        """Big-endian integer formed from the whole payload (0 when empty)."""
        return int.from_bytes(self.data, 'big')
    
    def pair_value(self, index: int) -> int:
        """Big-endian 16-bit value of data[index] and data[index + 1].
        
        Raises:
            ByteIndexError: If the pair does not lie within the payload
        """
        if index < 0 or index + 1 >= len(self.data):
            raise ByteIndexError(
                f"Byte pair {index} out of range for 0x{self.can_id:X} payload of {len(self.data)} bytes",
                index=index, length=len(self.data))
        return (self.data[index] << 8) | self.data[index + 1]
    
    @property
    def id_hex(self) -> str:
        """Identifier as uppercase hex without leading zeros."""
        return f"{self.can_id:X}"
    
    @property
    def data_hex(self) -> str:
        """Payload as space-separated two-digit uppercase hex."""
        return ' '.join(f"{b:02X}" for b in self.data)
    
    @property
    def data_decimal(self) -> str:
        """Payload as space-separated decimal bytes, used by the live display."""
        return ' '.join(str(b) for b in self.data)
    
    @property
    def data_length(self) -> int:
        """Return frame data length."""
        return len(self.data)
