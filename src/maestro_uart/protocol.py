"""
Pololu Maestro binary protocol: command framing and response decoding.

This module sits between the transport (raw serial I/O) and the channel /
controller objects (user-facing API).  It knows how to:

* build framed commands (``0xAA 0x0C opcode payload...``),
* split 14-bit values into two 7-bit data bytes and join them back,
* decode the two-byte little-endian signed responses of query commands.

It does **not** own the serial port — that belongs to
:class:`~maestro_uart.transport.SerialTransport`.

Values outside ``0..16383`` are not rejected: the split simply masks them,
so they wrap silently (a target of ``-1`` goes out as ``0x7F 0x7F``).
"""

from __future__ import annotations

from enum import IntEnum

from .constants import (
    FRAME_PREFIX,
    OP_GET_ERRORS,
    OP_GET_POSITION,
    OP_SET_ACCELERATION,
    OP_SET_SPEED,
    OP_SET_TARGET,
    RESPONSE_SIZE,
    SEVEN_BIT_MASK,
)
from .exceptions import ProtocolError

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class Opcode(IntEnum):
    """Command opcodes, before the high bit is cleared for the wire."""

    SET_TARGET = OP_SET_TARGET
    SET_SPEED = OP_SET_SPEED
    SET_ACCELERATION = OP_SET_ACCELERATION
    GET_POSITION = OP_GET_POSITION
    GET_ERRORS = OP_GET_ERRORS


# ---------------------------------------------------------------------------
# Value encoding
# ---------------------------------------------------------------------------


def split_14bit(value: int) -> tuple[int, int]:
    """Return ``(low7, high7)`` for *value*."""
    return value & SEVEN_BIT_MASK, (value >> 7) & SEVEN_BIT_MASK


def join_14bit(low7: int, high7: int) -> int:
    """Inverse of :func:`split_14bit` for values in ``0..16383``."""
    return (low7 & SEVEN_BIT_MASK) | ((high7 & SEVEN_BIT_MASK) << 7)


def decode_int16(data: bytes) -> int:
    """Decode a query response as a little-endian signed 16-bit integer."""
    if len(data) != RESPONSE_SIZE:
        raise ProtocolError(f"Expected {RESPONSE_SIZE}-byte response, got {len(data)}: {data!r}")
    return int.from_bytes(data, "little", signed=True)


# ---------------------------------------------------------------------------
# Command framing
# ---------------------------------------------------------------------------


def build_command(opcode: int, *payload: int) -> bytes:
    """Frame *opcode* and *payload* for the wire.

    Every byte after the prefix has its high bit cleared.
    """
    body = [opcode & SEVEN_BIT_MASK] + [b & SEVEN_BIT_MASK for b in payload]
    return bytes(FRAME_PREFIX) + bytes(body)


def value_command(opcode: int, channel: int, value: int) -> bytes:
    """Build a ``channel, low7, high7`` setter command (target/speed/acceleration)."""
    low7, high7 = split_14bit(value)
    return build_command(opcode, channel, low7, high7)


def position_query(channel: int) -> bytes:
    """Build the get-position command for *channel*."""
    return build_command(Opcode.GET_POSITION, channel)


def error_query() -> bytes:
    """Build the device-wide get-errors command."""
    return build_command(Opcode.GET_ERRORS)
