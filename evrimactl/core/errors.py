"""Domain-specific errors for evrimactl."""

from __future__ import annotations

from enum import Enum
from typing import Any


class EvrimactlError(Exception):
    """Base error for evrimactl."""


class ConfigValidationError(EvrimactlError):
    """Raised when server config, client options or an inventory file is malformed."""


class ConfigLoadError(EvrimactlError):
    """Raised when reading a server inventory file fails."""


class ErrorKind(str, Enum):
    CONNECTION_FAILED = "CONNECTION_FAILED"
    AUTH_FAILED = "AUTH_FAILED"
    TIMEOUT = "TIMEOUT"
    SOCKET_ERROR = "SOCKET_ERROR"
    INVALID_COMMAND = "INVALID_COMMAND"
    NOT_CONNECTED = "NOT_CONNECTED"


class RconError(EvrimactlError):
    """Base protocol/session error. ``kind`` is stable across releases."""

    kind: ErrorKind

    def __init__(self, message: str, details: Any = None) -> None:
        super().__init__(message)
        self.details = details


class ConnectionFailedError(RconError):
    """Raised when the TCP connection cannot be established."""

    kind = ErrorKind.CONNECTION_FAILED


class AuthFailedError(RconError):
    """Raised when the server does not accept the RCON password."""

    kind = ErrorKind.AUTH_FAILED


class RconTimeoutError(RconError):
    """Raised when connect, send or receive exceeds the configured timeout."""

    kind = ErrorKind.TIMEOUT


class SocketError(RconError):
    """Raised when the established connection fails to write or read."""

    kind = ErrorKind.SOCKET_ERROR


class NotConnectedError(RconError):
    """Raised when an operation needs a live connection and none exists."""

    kind = ErrorKind.NOT_CONNECTED


class InvalidCommandError(RconError):
    """Raised for unknown commands and invalid command parameters."""

    kind = ErrorKind.INVALID_COMMAND


CONNECTION_ERRORS: tuple[type[RconError], ...] = (
    NotConnectedError,
    SocketError,
    RconTimeoutError,
)
