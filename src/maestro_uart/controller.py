"""
Pololu Maestro Servo Controller Interface

Python API for driving Pololu Maestro servo controllers over their TTL
serial (UART) interface using the Pololu protocol.

Protocol details:
    - Baud: 9600, 8N1
    - Command frame: 0xAA 0x0C <opcode & 0x7F> <payload...>
    - Queries answer with two bytes, little-endian signed
"""

from __future__ import annotations

import logging
from enum import Enum

from . import protocol
from .channel import Channel
from .constants import (
    DEFAULT_BAUD,
    DEFAULT_CHANNEL_COUNT,
    DEFAULT_PORT,
    DEFAULT_TIMEOUT,
    RESPONSE_SIZE,
)
from .exceptions import InvalidState
from .transport import SerialTransport

logger = logging.getLogger(__name__)


class ControllerState(Enum):
    """Lifecycle of a :class:`MaestroUART`."""

    OPEN = "open"
    CLOSED = "closed"


class MaestroUART:
    """Interface for a Pololu Maestro servo controller via UART.

    The port is opened on construction.  Use as a context manager so every
    channel is parked and the port closed on the way out::

        with MaestroUART('/dev/ttyS0') as maestro:
            maestro.channels[0].set_range((992 * 4, 2000 * 4))
            maestro.channels[0].set_target(6000)

    Args:
        port: Serial port path.
        baudrate: Baud rate configured on the device.
        timeout: Read timeout in seconds; ``None`` blocks until the device answers.
        write_timeout: Write timeout in seconds; ``None`` blocks.
        channel_count: Number of servo channels on the device.

    Raises:
        ConnectionError: If the port cannot be opened.  No channels are
            created in that case.
    """

    def __init__(
        self,
        port: str = DEFAULT_PORT,
        baudrate: int = DEFAULT_BAUD,
        timeout: float | None = DEFAULT_TIMEOUT,
        write_timeout: float | None = DEFAULT_TIMEOUT,
        channel_count: int = DEFAULT_CHANNEL_COUNT,
    ) -> None:
        self._tx = SerialTransport(port, baudrate, timeout, write_timeout)
        self._tx.open()
        self._channels = tuple(Channel(no, self._tx) for no in range(channel_count))
        self._state = ControllerState.OPEN

    # -- Context manager ----------------------------------------------------

    def __enter__(self) -> MaestroUART:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self.is_open:
            self.shutdown()

    # -- State --------------------------------------------------------------

    @property
    def port(self) -> str:
        return self._tx.port

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def is_open(self) -> bool:
        """Return True until :meth:`shutdown` has run."""
        return self._state is ControllerState.OPEN

    @property
    def channels(self) -> tuple[Channel, ...]:
        """The servo channels, indexed by channel number."""
        return self._channels

    # -- Device queries -----------------------------------------------------

    def get_error(self) -> int:
        """Return the device's error word.

        Bit meanings are defined by the Maestro firmware; reading the word
        also clears it on the device.
        """
        self._require_open()
        self._tx.write(protocol.error_query())
        return protocol.decode_int16(self._tx.read(RESPONSE_SIZE))

    # -- Teardown -----------------------------------------------------------

    def shutdown(self) -> None:
        """Park every channel in order, then close the port.

        Each channel waits out its settle delay before the next one is
        parked.  The port is closed even if parking fails, and the first
        failure is re-raised afterwards.

        Raises:
            InvalidState: If the controller has already been shut down.
        """
        self._require_open()

        logger.info("Shutting down %d channels on %s", len(self._channels), self.port)
        try:
            for channel in self._channels:
                channel.shutdown()
        finally:
            self._tx.close()
            for channel in self._channels:
                channel.invalidate()
            self._state = ControllerState.CLOSED

    # -- Internal -----------------------------------------------------------

    def _require_open(self) -> None:
        if self._state is not ControllerState.OPEN:
            raise InvalidState("Controller has been shut down")


# ---------------------------------------------------------------------------
# Convenience factory
# ---------------------------------------------------------------------------


def get_controller(port: str = DEFAULT_PORT, **kwargs) -> MaestroUART:
    """Return an open controller instance (use as a context manager).

    Example::

        with get_controller('/dev/ttyS0') as maestro:
            maestro.channels[0].set_target(6000)
    """
    return MaestroUART(port, **kwargs)
