"""Shared pytest fixtures for Maestro tests."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from maestro_uart import MaestroUART
from maestro_uart.transport import SerialTransport


class FakeSerial:
    """Lightweight stand-in for ``serial.Serial``.

    Implements the subset of the pyserial API used by
    :class:`~maestro_uart.transport.SerialTransport`:
    ``write``, ``read``, ``flush``, ``close``, and ``is_open``.

    Every written frame is recorded in :attr:`written` and, together with
    closes, in :attr:`events` so tests can check ordering.  Call
    :meth:`queue_response` to stage bytes for upcoming reads; a read past
    the staged bytes returns short, which is what pyserial does when its
    timeout expires.
    """

    def __init__(self) -> None:
        self.is_open: bool = True
        self.written: list[bytes] = []
        self.events: list[tuple] = []
        self._rx: bytes = b""
        self.write_error: Exception | None = None

    # -- Helpers for tests --------------------------------------------------

    def queue_response(self, data: bytes) -> None:
        """Append *data* to the bytes returned by subsequent reads."""
        self._rx += data

    # -- pyserial interface -------------------------------------------------

    def write(self, data: bytes) -> int:
        if self.write_error is not None:
            raise self.write_error
        self.written.append(bytes(data))
        self.events.append(("write", bytes(data)))
        return len(data)

    def read(self, size: int = 1) -> bytes:
        data = self._rx[:size]
        self._rx = self._rx[size:]
        return data

    def flush(self) -> None:
        pass

    def close(self) -> None:
        self.is_open = False
        self.events.append(("close",))


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def fake_serial() -> FakeSerial:
    """Return a fresh ``FakeSerial`` instance."""
    return FakeSerial()


@pytest.fixture()
def no_sleep():
    """Patch out the channel settle delay, recording each call."""
    with patch("maestro_uart.channel.time.sleep") as sleep:
        yield sleep


@pytest.fixture()
def transport(fake_serial: FakeSerial) -> SerialTransport:
    """Return a ``SerialTransport`` wired to a fake serial port."""
    with patch("maestro_uart.transport.serial.Serial", return_value=fake_serial):
        tx = SerialTransport("/dev/fake")
        tx.open()
        return tx


@pytest.fixture()
def timed_transport(fake_serial: FakeSerial) -> SerialTransport:
    """Return a ``SerialTransport`` with a finite read timeout."""
    with patch("maestro_uart.transport.serial.Serial", return_value=fake_serial):
        tx = SerialTransport("/dev/fake", timeout=0.5)
        tx.open()
        return tx


@pytest.fixture()
def controller(fake_serial: FakeSerial, no_sleep) -> MaestroUART:
    """Return an open ``MaestroUART`` wired to a fake serial port."""
    with patch("maestro_uart.transport.serial.Serial", return_value=fake_serial):
        return MaestroUART("/dev/fake")
