"""
A single servo output line on a Maestro controller.

Channels are created by :class:`~maestro_uart.controller.MaestroUART` and
borrow its transport; they never open or close the port themselves.
Speed, acceleration and target are cached on the host side because the
device does not report them back.  The cache is updated only after the
command has been written, so a failed write leaves it unchanged.
"""

from __future__ import annotations

import logging
import time

from . import protocol
from .constants import NEUTRAL_TARGET, RESPONSE_SIZE, SETTLE_DELAY_S, UNBOUNDED
from .exceptions import InvalidState
from .protocol import Opcode
from .transport import SerialTransport

logger = logging.getLogger(__name__)


class Channel:
    """One servo channel.

    Positions and targets are in quarter-microseconds of pulse width
    (1500 µs -> 6000).  A ``min_position`` or ``max_position`` of ``0``
    leaves that side of the range unbounded.

    Args:
        no: Channel number on the device.
        transport: The controller's open transport (borrowed, not owned).
        min_position: Lowest target allowed, or ``0`` for no limit.
        max_position: Highest target allowed, or ``0`` for no limit.
    """

    def __init__(
        self,
        no: int,
        transport: SerialTransport,
        min_position: int = UNBOUNDED,
        max_position: int = UNBOUNDED,
    ) -> None:
        self._no = no
        self._tx = transport
        self._valid = True
        self.min_position = min_position
        self.max_position = max_position
        self._target = NEUTRAL_TARGET
        self._speed = 0
        self._acceleration = 0

    def __repr__(self) -> str:
        return (
            f"Channel(no={self._no}, target={self._target}, "
            f"range=({self.min_position}, {self.max_position}))"
        )

    @property
    def no(self) -> int:
        """Channel number, fixed at creation."""
        return self._no

    # -- Device queries -----------------------------------------------------

    def get_position(self) -> int:
        """Ask the device for the channel's current position.

        Blocks until two bytes arrive, or until the transport timeout
        expires if one was configured.
        """
        tx = self._require_valid()
        tx.write(protocol.position_query(self._no))
        return protocol.decode_int16(tx.read(RESPONSE_SIZE))

    # -- Setters ------------------------------------------------------------

    def set_speed(self, value: int) -> None:
        """Set the speed limit (0 = unlimited)."""
        self._send(Opcode.SET_SPEED, value)
        self._speed = value

    def set_acceleration(self, value: int) -> None:
        """Set the acceleration limit (0 = unlimited)."""
        self._send(Opcode.SET_ACCELERATION, value)
        self._acceleration = value

    def set_target(self, value: int) -> None:
        """Command the servo to *value*, clamped to the configured range.

        ``0`` is sent as-is: it stops pulses on the channel.
        """
        if value != NEUTRAL_TARGET:
            value = self.clamp(value)
        self._send(Opcode.SET_TARGET, value)
        self._target = value

    # -- Cached state -------------------------------------------------------

    def get_target(self) -> int:
        """Return the last target written to the device."""
        return self._target

    def get_speed(self) -> int:
        """Return the last speed written to the device."""
        return self._speed

    def get_acceleration(self) -> int:
        """Return the last acceleration written to the device."""
        return self._acceleration

    def get_range(self) -> tuple[int, int]:
        """Return ``(min_position, max_position)``."""
        return self.min_position, self.max_position

    def set_range(self, value: tuple[int, int]) -> None:
        """Set ``(min_position, max_position)``.  Not validated."""
        self.min_position, self.max_position = value

    def clamp(self, value: int) -> int:
        """Return *value* limited to the non-zero bounds of the range."""
        if self.min_position != UNBOUNDED and value < self.min_position:
            value = self.min_position
        if self.max_position != UNBOUNDED and value > self.max_position:
            value = self.max_position
        return value

    # -- Lifecycle ----------------------------------------------------------

    def shutdown(self) -> None:
        """Send the neutral target and wait for the servo to settle."""
        self.set_target(NEUTRAL_TARGET)
        time.sleep(SETTLE_DELAY_S)
        logger.debug("Channel %d parked", self._no)

    def invalidate(self) -> None:
        """Mark the channel unusable; called by the controller once the port is closed."""
        self._valid = False

    @property
    def is_valid(self) -> bool:
        return self._valid

    # -- Internal -----------------------------------------------------------

    def _require_valid(self) -> SerialTransport:
        if not self._valid:
            raise InvalidState(f"Channel {self._no} used after controller shutdown")
        return self._tx

    def _send(self, opcode: Opcode, value: int) -> None:
        self._require_valid().write(protocol.value_command(opcode, self._no, value))
