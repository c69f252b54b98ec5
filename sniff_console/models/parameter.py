"""
Parameter models: configured extraction rules and their decoded readings.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from sniff_console.exceptions import ConfigurationError
from sniff_console.utils.hex_text import normalize_address


@dataclass(frozen=True)
class Parameter:
    """A named rule for extracting a scaled reading from a frame payload.
    
    Attributes:
        name: Display label
        address: Identifier the parameter is read from, in canonical hex text
        byte_indices: Payload offsets concatenated big-endian, left to right
        coefficient: Scale factor applied to the raw integer
    """
    name: str
    address: str
    byte_indices: Tuple[int, ...]
    coefficient: float = 1.0
    
    def __post_init__(self):
        if not self.name:
            raise ConfigurationError("Parameter name cannot be empty", setting_name='name',
                                     setting_value=self.name)
        if not self.byte_indices:
            raise ConfigurationError(f"Parameter {self.name} has no byte indices",
                                     setting_name='byte_indices', setting_value=self.byte_indices)
        object.__setattr__(self, 'address', normalize_address(self.address, setting_name='address'))
        object.__setattr__(self, 'byte_indices', tuple(int(i) for i in self.byte_indices))
        if any(i < 0 for i in self.byte_indices):
            raise ConfigurationError(f"Parameter {self.name} has a negative byte index",
                                     setting_name='byte_indices', setting_value=self.byte_indices,
                                     expected='non-negative payload offsets')
        object.__setattr__(self, 'coefficient', float(self.coefficient))
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Parameter':
        """Build a Parameter from a config dictionary.
        
        Expected keys: name, address, byte_indices, coefficient (optional).
        
        Raises:
            ConfigurationError: If a key is missing or malformed
        """
        try:
            return cls(
                name=str(data['name']),
                address=data['address'],
                byte_indices=tuple(data['byte_indices']),
                coefficient=data.get('coefficient', 1.0),
            )
        except KeyError as e:
            raise ConfigurationError(f"Parameter definition missing key {e}", setting_name=str(e),
                                     setting_value=data) from e
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid parameter definition {data!r}: {e}",
                                     setting_value=data) from e
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'address': self.address,
            'byte_indices': list(self.byte_indices),
            'coefficient': self.coefficient,
        }


@dataclass(frozen=True)
class ParameterReading:
    """A decoded parameter value.
    
    Attributes:
        name: Parameter name
        value: Scaled reading (raw_value * coefficient)
        raw_value: Unsigned integer concatenated from the payload bytes
        address: Identifier the reading came from
        timestamp: Arrival time of the source frame
    """
    name: str
    value: float
    raw_value: int
    address: str
    timestamp: Optional[float] = None
    
    def __str__(self) -> str:
        """String representation for display."""
        return f"{self.name}={self.value}"
