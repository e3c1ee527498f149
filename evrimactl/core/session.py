"""RCON session: handshake, reconnect with backoff, and command execution."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable, MutableMapping
from datetime import datetime, timezone
from typing import Any

from evrimactl.core.commands import canonical_name, definition_for
from evrimactl.core.errors import (
    CONNECTION_ERRORS,
    AuthFailedError,
    NotConnectedError,
    RconError,
)
from evrimactl.core.model import (
    ClientOptions,
    CommandInput,
    CommandResult,
    ConnectionState,
    ServerConfig,
)
from evrimactl.core.parsers import parse_player_data, parse_players, parse_server_details
from evrimactl.core.protocol import (
    AUTH_SUCCESS,
    build_auth_packet,
    build_command_packet,
    strip_terminator,
)
from evrimactl.transports.base import Transport
from evrimactl.transports.tcp import ProtocolSocket

MAX_BACKOFF_MS = 30000
LOGGER = logging.getLogger(__name__)

TransportFactory = Callable[[int], Transport]
Sleep = Callable[[float], Awaitable[Any]]


def backoff_delay_ms(base_delay_ms: int, attempt: int) -> int:
    """Delay before reconnect ``attempt`` (1-based), doubling up to 30s."""
    return min(base_delay_ms * 2 ** (attempt - 1), MAX_BACKOFF_MS)


class SessionLogger(logging.LoggerAdapter):
    """Prefixes records with the session name; debug/info only when enabled."""

    def __init__(self, logger: logging.Logger, name: str, verbose: bool) -> None:
        super().__init__(logger, {"session": name})
        self.prefix = f"[RCON:{name}]"
        self.verbose = verbose

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        return f"{self.prefix} {msg}", kwargs

    def isEnabledFor(self, level: int) -> bool:
        if level < logging.WARNING and not self.verbose:
            return False
        return super().isEnabledFor(level)


def _format_response(command: str, params: str | None, response: str) -> Any:
    if command == "players":
        return parse_players(response)
    if command == "srv:details":
        return parse_server_details(response)
    if command == "playData":
        return parse_player_data(response)
    text = strip_terminator(response)
    if command in ("announce", "ban", "kick"):
        return f"command:{text}:{params or ''}"
    if command == "dm":
        return f"[{command}]:{text}"
    return text


class RconSession:
    """Long-lived session against one server.

    The session owns at most one transport at a time and replaces it on every
    connect or reconnect. Commands are request/response with no correlation
    IDs, so callers must await each command before issuing the next one.
    """

    def __init__(
        self,
        config: ServerConfig,
        options: ClientOptions | None = None,
        *,
        transport_factory: TransportFactory | None = None,
        sleep: Sleep | None = None,
    ) -> None:
        self.config = config
        self.options = options or ClientOptions()
        self.display_name = self.options.name or config.address
        self.logger = SessionLogger(LOGGER, self.display_name, self.options.debug)
        self._transport_factory = transport_factory or ProtocolSocket
        self._sleep = sleep or asyncio.sleep
        self._transport: Transport | None = None
        self._authenticating = False
        self.reconnect_attempts = 0

    @property
    def state(self) -> ConnectionState:
        if self._authenticating:
            return ConnectionState.AUTHENTICATING
        if self._transport is None:
            return ConnectionState.DISCONNECTED
        return self._transport.connection_state

    @property
    def is_connected(self) -> bool:
        return self._transport is not None and self._transport.is_connected

    async def __aenter__(self) -> RconSession:
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.disconnect()

    async def connect(self) -> bool:
        """Connect and authenticate, retrying with backoff when enabled."""
        if self.is_connected:
            self.logger.debug("Already connected")
            return True

        self._teardown()
        while True:
            self.logger.info("Connecting to %s", self.config.address)
            try:
                await self._open_and_authenticate()
            except RconError as exc:
                self.logger.error("Connection failed: %s", exc)
                self._teardown()
                if not self._can_retry():
                    self.reconnect_attempts = 0
                    raise
                self.reconnect_attempts += 1
                delay_ms = backoff_delay_ms(self.options.reconnect_delay_ms, self.reconnect_attempts)
                self.logger.info(
                    "Reconnection attempt %d/%d (waiting %dms)",
                    self.reconnect_attempts,
                    self.options.max_reconnect_attempts,
                    delay_ms,
                )
                await self._sleep(delay_ms / 1000)
                continue

            self.logger.info("Successfully connected and authenticated")
            self.reconnect_attempts = 0
            return True

    def disconnect(self) -> None:
        if self._transport is not None:
            self.logger.info("Disconnecting")
        self._teardown()

    async def send_command(self, command: str, params: str | None = None) -> CommandResult:
        await self._ensure_connected()

        name = canonical_name(command)
        if name is None:
            return _result(command, False, "", f"Unknown command: {command}")

        self.logger.debug("Executing command: %s params=%r (%s)", name, params, definition_for(name))
        try:
            response = await self._round_trip(name, params)
        except CONNECTION_ERRORS as exc:
            if not self.options.auto_reconnect:
                self.logger.error("Command failed: %s: %s", name, exc)
                raise
            self.logger.warning("Connection lost during %s (%s), attempting reconnect", name, exc)
            self._teardown()
            try:
                await self.connect()
                response = await self._round_trip(name, params)
            except RconError as retry_exc:
                self.logger.error("Reconnect failed: %s", retry_exc)
                raise
        except RconError as exc:
            self.logger.error("Command failed: %s: %s", name, exc)
            raise
        except (OSError, ValueError) as exc:
            self.logger.error("Command failed: %s: %s", name, exc)
            return _result(name, False, "", str(exc))

        self.logger.debug("Response received for %s: %r", name, response)
        return _result(name, True, response, _format_response(name, params, response))

    async def batch(self, commands: Iterable[CommandInput | tuple[str, str | None]]) -> list[CommandResult]:
        """Run commands strictly in submission order, one result per entry."""
        results: list[CommandResult] = []
        for item in commands:
            if isinstance(item, CommandInput):
                command, params = item.command, item.params
            else:
                command, params = item
            results.append(await self.send_command(command, params))
        return results

    async def _open_and_authenticate(self) -> None:
        auth_packet = build_auth_packet(self.config.password)
        transport = self._transport_factory(self.options.timeout_ms)
        self._transport = transport
        await transport.connect(self.config.host, self.config.port)
        self.logger.debug("Socket connected, authenticating")

        self._authenticating = True
        try:
            response = await transport.send_and_receive(auth_packet)
        finally:
            self._authenticating = False

        if AUTH_SUCCESS not in response:
            raise AuthFailedError("Authentication failed: invalid password", strip_terminator(response))

    async def _ensure_connected(self) -> None:
        if self.is_connected:
            return
        if not self.options.auto_reconnect:
            raise NotConnectedError("Client is not connected")
        self.logger.info("Not connected, attempting to connect")
        await self.connect()

    async def _round_trip(self, command: str, params: str | None) -> str:
        if self._transport is None:
            raise NotConnectedError("Client is not connected")
        packet = build_command_packet(command, params)
        return await self._transport.send_and_receive(packet)

    def _can_retry(self) -> bool:
        return (
            self.options.auto_reconnect
            and self.reconnect_attempts < self.options.max_reconnect_attempts
        )

    def _teardown(self) -> None:
        if self._transport is not None:
            self._transport.disconnect()
            self._transport = None
        self._authenticating = False


def _result(command: str, success: bool, raw: str, data: Any) -> CommandResult:
    return CommandResult(
        success=success,
        data=data,
        raw=raw,
        timestamp=datetime.now(timezone.utc),
        command=command,
    )
