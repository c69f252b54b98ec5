"""
Constants and configuration values for the CAN diff sniffer.

This module centralizes the magic numbers, limits and default settings used
throughout the console application:
- Ingestion window
- Default serial link settings
- Default target addresses for the live display
- Operator key bindings
- Timing constants (poll, refresh, transient pause)
- Output filename patterns
"""

# Ingestion buffer window (milliseconds)
WINDOW_MS_DEFAULT = 1000

# Default serial link settings
SERIAL_PORT_DEFAULT = 'COM11'
SERIAL_BAUDRATE_DEFAULT = 115200
SERIAL_READ_TIMEOUT = 0.1  # seconds
TRANSPORT_DEFAULT = 'serial'
TRANSPORT_TYPES = ('serial', 'python-can', 'sim')

# IDs shown in the live display, as uppercase hex without leading zeros
TARGET_ADDRESSES_DEFAULT = ['136', '13A', '17C', '1DC']

# Comparison granularity
COMPARE_MODE_WHOLE = 'whole'
COMPARE_MODE_PAIR = 'pair'
COMPARE_MODES = (COMPARE_MODE_WHOLE, COMPARE_MODE_PAIR)

# Operator keys
KEY_CAPTURE = 's'
KEY_INCREASE = 'i'
KEY_DECREASE = 'k'
KEY_QUIT = 'q'

# Timing constants (seconds)
POLL_INTERVAL = 0.1  # keyboard polling
REFRESH_INTERVAL = 1.0  # live display redraw
TRANSIENT_PAUSE = 0.002  # pause after a no-data read
WORKER_JOIN_TIMEOUT = 2.0

# Output files
RAW_LOG_PREFIX = 'can_log'
BASELINE_PREFIX = 'baseline'
FILE_TIMESTAMP_FORMAT = '%Y%m%d_%H%M%S'

# Live display
NO_DATA_TEXT = 'no data'
PARAMETER_VALUE_FORMAT = '{:.2f}'
