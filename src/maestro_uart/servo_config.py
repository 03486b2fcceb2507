"""
Servo configuration — reusable logic for applying per-channel ranges,
speed and acceleration limits from a YAML configuration file.

This module provides the building blocks that both the CLI script and
future system-integration code can import directly::

    from maestro_uart.servo_config import apply_all, load_config

    config = load_config("config/servo_config.yaml")
    with get_controller(config.port, baudrate=config.baudrate) as maestro:
        report = apply_all(maestro, config)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .constants import DEFAULT_BAUD, MAX_14BIT_VALUE, UNBOUNDED
from .controller import MaestroUART
from .exceptions import MaestroError, ValidationError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Configuration data model
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ChannelConfig:
    """Validated configuration for a single servo channel."""

    channel: int
    name: str
    min_position: int = UNBOUNDED
    max_position: int = UNBOUNDED
    speed: int = 0
    acceleration: int = 0
    home: int | None = None

    @property
    def label(self) -> str:
        """Human-readable label, e.g. ``CH0 left_wheel``."""
        return f"CH{self.channel} {self.name}"


@dataclass(frozen=True)
class ServoConfig:
    """Top-level configuration loaded from a YAML file."""

    port: str
    baudrate: int = DEFAULT_BAUD
    timeout: float | None = None
    channels: list[ChannelConfig] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Config loading & validation
# ---------------------------------------------------------------------------


def load_config(path: str | Path) -> ServoConfig:
    """Load and validate a servo configuration from a YAML file.

    Args:
        path: Path to the YAML config file.

    Returns:
        A validated :class:`ServoConfig`.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValidationError: If the config is malformed or contains invalid values.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ValidationError(f"Cannot parse {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ValidationError(f"Config file must be a YAML mapping, got {type(raw).__name__}")

    # -- Top-level fields ---------------------------------------------------
    port = raw.get("port")
    if not isinstance(port, str) or not port:
        raise ValidationError("Config must specify a non-empty 'port' string")

    baudrate = raw.get("baudrate", DEFAULT_BAUD)
    if isinstance(baudrate, bool) or not isinstance(baudrate, int) or baudrate <= 0:
        raise ValidationError(f"'baudrate' must be a positive integer, got {baudrate!r}")

    timeout = raw.get("timeout")
    if timeout is not None and (
        isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0
    ):
        raise ValidationError(f"'timeout' must be a positive number or null, got {timeout!r}")

    # -- Channels -----------------------------------------------------------
    raw_channels = raw.get("channels")
    if not isinstance(raw_channels, dict) or not raw_channels:
        raise ValidationError("Config must contain a non-empty 'channels' mapping")

    channels = [_parse_channel(key, data) for key, data in raw_channels.items()]
    channels.sort(key=lambda c: c.channel)

    return ServoConfig(port=port, baudrate=baudrate, timeout=timeout, channels=channels)


def _parse_channel(ch_key: int | str, data: dict) -> ChannelConfig:
    """Parse and validate a single channel entry from the config."""
    try:
        channel = int(ch_key)
    except (ValueError, TypeError) as exc:
        raise ValidationError(f"Channel key must be an integer, got {ch_key!r}") from exc

    if channel < 0:
        raise ValidationError(f"Channel must be >= 0, got {channel}")

    if not isinstance(data, dict):
        raise ValidationError(f"Channel {channel} config must be a mapping")

    name = data.get("name", f"servo{channel}")
    if not isinstance(name, str) or not name:
        raise ValidationError(f"Channel {channel}: 'name' must be a non-empty string")

    min_position = _require_value(data, "min", channel)
    max_position = _require_value(data, "max", channel)
    if min_position != UNBOUNDED and max_position != UNBOUNDED and min_position > max_position:
        raise ValidationError(
            f"Channel {channel}: min ({min_position}) exceeds max ({max_position})"
        )

    home = data.get("home")
    if home is not None:
        home = _require_value(data, "home", channel)

    return ChannelConfig(
        channel=channel,
        name=name,
        min_position=min_position,
        max_position=max_position,
        speed=_require_value(data, "speed", channel),
        acceleration=_require_value(data, "acceleration", channel),
        home=home,
    )


def _require_value(data: dict, key: str, channel: int) -> int:
    """Return ``data[key]`` (default 0) as an int in ``0..16383``."""
    val = data.get(key, 0)
    if isinstance(val, bool) or not isinstance(val, int) or not (0 <= val <= MAX_14BIT_VALUE):
        raise ValidationError(
            f"Channel {channel}: '{key}' must be an integer 0-{MAX_14BIT_VALUE}, got {val!r}"
        )
    return val


# ---------------------------------------------------------------------------
# Applying
# ---------------------------------------------------------------------------


@dataclass
class ChannelResult:
    """Outcome of applying configuration to a single channel."""

    channel_config: ChannelConfig
    success: bool
    message: str


@dataclass
class ApplyReport:
    """Aggregate outcome of an apply_all operation."""

    results: list[ChannelResult] = field(default_factory=list)

    @property
    def all_ok(self) -> bool:
        return all(r.success for r in self.results)

    @property
    def summary(self) -> str:
        passed = sum(1 for r in self.results if r.success)
        total = len(self.results)
        return f"{passed}/{total} channels {'OK' if self.all_ok else 'FAILED'}"


def apply_channel(controller: MaestroUART, ch: ChannelConfig) -> ChannelResult:
    """Apply range, speed, acceleration and home target to one channel.

    Args:
        controller: An open MaestroUART instance.
        ch: Channel configuration to apply.

    Returns:
        A :class:`ChannelResult` indicating success or failure.
    """
    if ch.channel >= len(controller.channels):
        msg = f"{ch.label} → FAILED: controller has only {len(controller.channels)} channels"
        logger.error("Apply failed: %s", msg)
        return ChannelResult(ch, success=False, message=msg)

    channel = controller.channels[ch.channel]
    try:
        channel.set_range((ch.min_position, ch.max_position))
        channel.set_speed(ch.speed)
        channel.set_acceleration(ch.acceleration)
        if ch.home is not None:
            channel.set_target(ch.home)
    except MaestroError as exc:
        msg = f"{ch.label} → FAILED: {exc}"
        logger.error("Apply failed: %s", msg)
        return ChannelResult(ch, success=False, message=msg)

    msg = (
        f"{ch.label} → range ({ch.min_position}, {ch.max_position}), "
        f"speed {ch.speed}, accel {ch.acceleration}"
    )
    if ch.home is not None:
        msg += f", home {channel.get_target()}"
    logger.info("Applied %s", msg)
    return ChannelResult(ch, success=True, message=msg)


def apply_all(controller: MaestroUART, config: ServoConfig) -> ApplyReport:
    """Apply every channel in *config*, in channel order."""
    report = ApplyReport()
    for ch in config.channels:
        report.results.append(apply_channel(controller, ch))
    return report
