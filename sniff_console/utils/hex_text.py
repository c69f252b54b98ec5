"""
Hex text helpers.

Identifiers are matched against target and parameter addresses in their
uppercase hexadecimal text form without leading zeros ("17C", not "017c").
"""
from typing import Union

from sniff_console.exceptions import ConfigurationError
from sniff_console.utils.regex_patterns import REGEX_HEX_ID


def format_address(can_id: int) -> str:
    """Return the canonical text form of a CAN identifier."""
    return f"{can_id:X}"


def normalize_address(value: Union[str, int], setting_name: str = 'address') -> str:
    """Normalize a configured address to the canonical text form.

    Integers are taken as-is; strings are read as hex, with an optional
    0x prefix.

    Raises:
        ConfigurationError: If the value is not a valid hex identifier
    """
    if isinstance(value, bool):
        raise ConfigurationError(f"Invalid {setting_name}: {value!r}", setting_name=setting_name,
                                 setting_value=value, expected='hex identifier')
    if isinstance(value, int):
        if value < 0:
            raise ConfigurationError(f"Invalid {setting_name}: {value!r}", setting_name=setting_name,
                                     setting_value=value, expected='non-negative identifier')
        return format_address(value)
    text = str(value).strip()
    if text.lower().startswith('0x'):
        text = text[2:]
    if not REGEX_HEX_ID.match(text):
        raise ConfigurationError(f"Invalid {setting_name}: {value!r}", setting_name=setting_name,
                                 setting_value=value, expected='hex identifier')
    return format_address(int(text, 16))
