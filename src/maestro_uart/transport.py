"""
Serial transport layer for the Pololu Maestro servo controller.

Handles the physical serial connection and exact-length binary reads and
writes.  Knows nothing about what the bytes mean — that's
:mod:`protocol`'s job.

Typical usage (via :class:`~maestro_uart.controller.MaestroUART`)::

    transport = SerialTransport("/dev/ttyS0")
    transport.open()
    transport.write(b"\\xaa\\x0c\\x21")
    data = transport.read(2)
    transport.close()
"""

from __future__ import annotations

import logging

import serial

from .constants import DEFAULT_BAUD, DEFAULT_PORT, DEFAULT_TIMEOUT
from .exceptions import ConnectionError, ProtocolTimeout, TransportError

logger = logging.getLogger(__name__)


class SerialTransport:
    """Manages a serial connection to a Maestro controller.

    Args:
        port: Serial port path (e.g. ``/dev/ttyS0``).
        baudrate: Baud rate (default 9600).
        timeout: Read timeout in seconds, or ``None`` to block until the
            requested number of bytes arrives.
        write_timeout: Write timeout in seconds, or ``None`` to block.
    """

    def __init__(
        self,
        port: str = DEFAULT_PORT,
        baudrate: int = DEFAULT_BAUD,
        timeout: float | None = DEFAULT_TIMEOUT,
        write_timeout: float | None = DEFAULT_TIMEOUT,
    ) -> None:
        self.port = port
        self.baudrate = baudrate
        self.timeout = timeout
        self.write_timeout = write_timeout
        self._ser: serial.Serial | None = None

    # -- Lifecycle ----------------------------------------------------------

    def open(self) -> None:
        """Open the serial port (8N1).

        Raises:
            ConnectionError: If the port cannot be opened.
        """
        logger.info("Opening serial port %s at %d baud", self.port, self.baudrate)
        try:
            self._ser = serial.Serial(
                port=self.port,
                baudrate=self.baudrate,
                bytesize=serial.EIGHTBITS,
                parity=serial.PARITY_NONE,
                stopbits=serial.STOPBITS_ONE,
                timeout=self.timeout,
                write_timeout=self.write_timeout,
            )
        except (serial.SerialException, ValueError) as exc:
            raise ConnectionError(f"Cannot open {self.port}: {exc}") from exc

    def close(self) -> None:
        """Close the serial port (safe to call multiple times)."""
        if self._ser and self._ser.is_open:
            self._ser.close()
            logger.info("Serial port %s closed", self.port)

    @property
    def is_open(self) -> bool:
        """Return ``True`` if the serial port is currently open."""
        return self._ser is not None and self._ser.is_open

    # -- I/O ----------------------------------------------------------------

    def write(self, data: bytes) -> None:
        """Write *data* in full and flush it out of the OS buffer.

        Raises:
            ConnectionError: If the port is not open.
            ProtocolTimeout: If the write timeout expires.
            TransportError: On any other serial failure.
        """
        ser = self._require_open()
        logger.debug("TX: %s", data.hex(" "))
        try:
            ser.write(data)
            ser.flush()
        except serial.SerialTimeoutException as exc:
            raise ProtocolTimeout(f"Write to {self.port} timed out") from exc
        except serial.SerialException as exc:
            raise TransportError(f"Write to {self.port} failed: {exc}") from exc

    def read(self, size: int) -> bytes:
        """Read exactly *size* bytes.

        With no timeout configured this blocks until the bytes arrive.

        Raises:
            ConnectionError: If the port is not open.
            ProtocolTimeout: If the read timeout expires first.
            TransportError: On any other serial failure or a short read.
        """
        ser = self._require_open()
        try:
            data = ser.read(size)
        except serial.SerialException as exc:
            raise TransportError(f"Read from {self.port} failed: {exc}") from exc
        logger.debug("RX: %s", data.hex(" "))

        if len(data) < size:
            if self.timeout is not None:
                raise ProtocolTimeout(
                    f"Expected {size} bytes from {self.port} within {self.timeout}s, "
                    f"got {len(data)}"
                )
            raise TransportError(f"Short read from {self.port}: expected {size}, got {len(data)}")
        return data

    # -- Internal -----------------------------------------------------------

    def _require_open(self) -> serial.Serial:
        """Return the open serial port or raise."""
        if not self.is_open:
            raise ConnectionError("Serial port not open — call open() first.")
        assert self._ser is not None  # for type-checker
        return self._ser
