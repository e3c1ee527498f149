"""Packet framing for the Evrima RCON wire protocol.

Auth packet:    0x01 | password | 0x00
Command packet: 0x02 | opcode | params | 0x00

All text is latin-1 so every code point 0-255 maps to exactly one byte. There is
no escaping: a 0x00 inside params ends the packet early on the server side.
"""

from __future__ import annotations

from evrimactl.core.commands import code_for
from evrimactl.core.errors import ConfigValidationError, InvalidCommandError

AUTH_PREFIX = 0x01
COMMAND_PREFIX = 0x02
TERMINATOR = 0x00
ENCODING = "latin-1"
AUTH_SUCCESS = "Password Accepted"


def build_auth_packet(password: str) -> bytes:
    try:
        payload = password.encode(ENCODING)
    except UnicodeEncodeError as exc:
        raise ConfigValidationError("Password contains characters outside latin-1") from exc
    return bytes((AUTH_PREFIX,)) + payload + bytes((TERMINATOR,))


def build_command_packet(command: str, params: str | None = None) -> bytes:
    code = code_for(command)
    if code is None:
        raise InvalidCommandError(f"Unknown command: {command}")
    try:
        payload = (params or "").encode(ENCODING)
    except UnicodeEncodeError as exc:
        raise InvalidCommandError(
            f"Parameters for '{command}' contain characters outside latin-1", exc
        ) from exc
    return bytes((COMMAND_PREFIX, code)) + payload + bytes((TERMINATOR,))


def decode_command_packet(packet: bytes) -> tuple[int, str]:
    """Split a command packet back into ``(opcode, params)``."""
    if len(packet) < 3:
        raise InvalidCommandError(f"Command packet too short: {len(packet)} bytes")
    if packet[0] != COMMAND_PREFIX:
        raise InvalidCommandError(f"Not a command packet (prefix {packet[0]:#04x})")
    if packet[-1] != TERMINATOR:
        raise InvalidCommandError("Command packet is missing its terminator")
    return packet[1], packet[2:-1].decode(ENCODING)


def decode_response(data: bytes) -> str:
    return data.decode(ENCODING)


def strip_terminator(text: str) -> str:
    return text.rstrip(chr(TERMINATOR))
