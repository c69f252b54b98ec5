"""
Data models for the CAN diff sniffer.

Models:
- CanFrame: An immutable parsed CAN frame
- Parameter: A configured byte-extraction rule
- ParameterReading: A decoded, scaled parameter value
"""

from sniff_console.models.can_frame import CanFrame
from sniff_console.models.parameter import Parameter, ParameterReading

__all__ = ['CanFrame', 'Parameter', 'ParameterReading']
