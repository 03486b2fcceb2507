"""Shared runtime constants for the Pololu Maestro servo controller.

This is the canonical source of truth for protocol framing, value limits,
and controller defaults.  Other modules should import from here rather
than defining their own copies.
"""

import sys

# ---------------------------------------------------------------------------
# Protocol framing
# ---------------------------------------------------------------------------

FRAME_PREFIX = (0xAA, 0x0C)  # Pololu protocol start byte + default device number
SEVEN_BIT_MASK = 0x7F
MAX_14BIT_VALUE = 0x3FFF  # 16383

OP_SET_TARGET = 0x84
OP_SET_SPEED = 0x87
OP_SET_ACCELERATION = 0x89
OP_GET_POSITION = 0x90
OP_GET_ERRORS = 0xA1

RESPONSE_SIZE = 2  # every query answers with a little-endian int16

# ---------------------------------------------------------------------------
# Channel semantics
# ---------------------------------------------------------------------------

NEUTRAL_TARGET = 0  # "off" target; never clamped
UNBOUNDED = 0  # a min/max position of 0 means no limit on that side
SETTLE_DELAY_S = 0.1

# ---------------------------------------------------------------------------
# Controller / runtime defaults
# ---------------------------------------------------------------------------

DEFAULT_PORT = "COM1" if sys.platform.startswith("win") else "/dev/ttyS0"
DEFAULT_BAUD = 9600
DEFAULT_TIMEOUT = None  # block indefinitely, like the firmware tools do
DEFAULT_CHANNEL_COUNT = 24
