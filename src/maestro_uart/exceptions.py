"""
Exception hierarchy for the Pololu Maestro servo controller.

All exceptions inherit from :class:`MaestroError` so callers can catch
broadly (``except MaestroError``) or narrowly (``except ProtocolTimeout``).
"""


class MaestroError(Exception):
    """Base exception for all Maestro errors."""


class TransportError(MaestroError):
    """Raised when bytes cannot be written to or read from the serial link."""


class ConnectionError(TransportError):  # noqa: A001 – intentional shadow of builtin
    """Raised when the serial connection is unavailable or fails to open."""


class ProtocolTimeout(MaestroError):
    """Raised when the device does not answer within the configured timeout."""


class ProtocolError(MaestroError):
    """Raised when a response frame cannot be decoded."""


class InvalidState(MaestroError):
    """Raised when a command is issued after the controller has been shut down."""


class ValidationError(MaestroError):
    """Raised when a configuration value fails validation."""
