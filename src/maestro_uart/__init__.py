"""Pololu Maestro Servo Controller Python Interface"""

from .channel import Channel
from .constants import DEFAULT_CHANNEL_COUNT, NEUTRAL_TARGET, SETTLE_DELAY_S
from .controller import ControllerState, MaestroUART, get_controller
from .exceptions import (
    ConnectionError,
    InvalidState,
    MaestroError,
    ProtocolError,
    ProtocolTimeout,
    TransportError,
    ValidationError,
)
from .protocol import Opcode

__all__ = [
    "Channel",
    "ConnectionError",
    "ControllerState",
    "DEFAULT_CHANNEL_COUNT",
    "InvalidState",
    "MaestroError",
    "MaestroUART",
    "NEUTRAL_TARGET",
    "Opcode",
    "ProtocolError",
    "ProtocolTimeout",
    "SETTLE_DELAY_S",
    "TransportError",
    "ValidationError",
    "get_controller",
]
__version__ = "0.1.0"
