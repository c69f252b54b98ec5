"""
Shared regex patterns for parsing sniffer text lines.

Centralizes the patterns used by the frame parser and the configuration
layer so both accept exactly the same hex spellings.
"""
import re

# CAN identifier: one or more hex digits, no prefix, no sign
REGEX_HEX_ID = re.compile(r'^[0-9A-Fa-f]+$')
# One payload byte: one or two hex digits
REGEX_HEX_BYTE = re.compile(r'^[0-9A-Fa-f]{1,2}$')
