"""
Custom exception classes for the CAN diff sniffer.

This module provides specific exception types for the error scenarios the
application distinguishes: transport failures, malformed frame lines,
invalid configuration and byte-index contract violations.
"""

from typing import Any


class SnifferException(Exception):
    """Base exception for all CAN diff sniffer errors.
    
    All custom exceptions inherit from this class so callers can catch every
    application-specific error while preserving the hierarchy.
    """
    pass


class TransportError(SnifferException):
    """Exception raised when the serial link cannot be opened or fails hard.
    
    Attributes:
        transport_type: Type of transport that failed (e.g., 'serial', 'python-can')
        operation: Operation that failed (e.g., 'open', 'read')
        original_error: The underlying exception that caused this error
    """
    
    def __init__(self, message: str, transport_type: str = None, operation: str = None,
                 original_error: Exception = None):
        super().__init__(message)
        self.transport_type = transport_type
        self.operation = operation
        self.original_error = original_error


class FrameParseError(SnifferException):
    """Exception raised when a raw text line is not a valid frame.
    
    Attributes:
        line: The raw line that failed to parse
        original_error: The underlying exception, if any
    """
    
    def __init__(self, message: str, line: str = None, original_error: Exception = None):
        super().__init__(message)
        self.line = line
        self.original_error = original_error


class ConfigurationError(SnifferException):
    """Exception raised for invalid configuration values.
    
    Attributes:
        setting_name: Name of the setting that is invalid
        setting_value: The invalid value
        expected: Description of expected value
    """
    
    def __init__(self, message: str, setting_name: str = None, setting_value: Any = None,
                 expected: str = None):
        super().__init__(message)
        self.setting_name = setting_name
        self.setting_value = setting_value
        self.expected = expected


class ByteIndexError(SnifferException, IndexError):
    """Raised when a byte-pair offset falls outside a frame's payload.

    Callers are expected to stay within the payload; this is never clamped.
    """

    def __init__(self, message: str, index: int = None, length: int = None):
        super().__init__(message)
        self.index = index
        self.length = length
