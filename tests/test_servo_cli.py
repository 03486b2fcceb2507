"""Tests for the ``scripts/servo_cli.py`` run sequence (fake serial port)."""

from __future__ import annotations

import importlib.util
from pathlib import Path
from unittest.mock import patch

import pytest

from maestro_uart import TransportError
from maestro_uart.servo_config import ChannelConfig, ServoConfig

SCRIPT = Path(__file__).resolve().parent.parent / "scripts" / "servo_cli.py"


@pytest.fixture(scope="module")
def servo_cli():
    """Import the CLI script as a module."""
    spec = importlib.util.spec_from_file_location("servo_cli", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture()
def config() -> ServoConfig:
    return ServoConfig(port="/dev/fake", channels=[ChannelConfig(0, "pan", home=6000)])


class TestRun:
    def test_success_reports_parked(self, servo_cli, config, fake_serial, no_sleep, capsys):
        with patch("maestro_uart.transport.serial.Serial", return_value=fake_serial):
            assert servo_cli.run(config, status=False, do_sweep=False) == 0
        assert "All channels parked" in capsys.readouterr().out
        assert not fake_serial.is_open

    def test_failed_shutdown_not_reported_as_parked(
        self, servo_cli, config, fake_serial, no_sleep, capsys
    ):
        with (
            patch("maestro_uart.transport.serial.Serial", return_value=fake_serial),
            patch(
                "maestro_uart.channel.Channel.shutdown",
                side_effect=TransportError("unplugged"),
            ),
        ):
            assert servo_cli.run(config, status=False, do_sweep=False) == 1
        out = capsys.readouterr().out
        assert "Aborted: unplugged" in out
        assert "All channels parked" not in out
        assert not fake_serial.is_open

    def test_connect_failure(self, servo_cli, config, capsys):
        with patch(
            "maestro_uart.transport.serial.Serial",
            side_effect=ValueError("Not a valid baudrate"),
        ):
            assert servo_cli.run(config, status=False, do_sweep=False) == 1
        assert "Cannot connect" in capsys.readouterr().out
