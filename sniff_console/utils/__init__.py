"""
Utility modules shared by the parser and configuration layer.

This package contains:
- regex_patterns: Compiled patterns for hex identifiers and byte tokens
- hex_text: Helpers for the uppercase hex text form used to match addresses
"""

from sniff_console.utils.hex_text import normalize_address, format_address

__all__ = ['normalize_address', 'format_address']
