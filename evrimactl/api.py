"""Stable public API for building tooling on top of evrimactl.

This module is the supported integration surface for third-party callers.
Avoid importing from private/internal modules unless intentionally depending on
non-stable internals.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import asdict
from pathlib import Path
from typing import Any

from evrimactl.core.commands import (
    all_commands,
    code_for,
    commands_by_category,
    definition_for,
    is_known,
)
from evrimactl.core.errors import (
    AuthFailedError,
    ConfigLoadError,
    ConfigValidationError,
    ConnectionFailedError,
    ErrorKind,
    EvrimactlError,
    InvalidCommandError,
    NotConnectedError,
    RconError,
    RconTimeoutError,
    SocketError,
)
from evrimactl.core.inventory import load_servers
from evrimactl.core.model import (
    ClientOptions,
    CommandDefinition,
    CommandInput,
    CommandResult,
    ConnectionState,
    PlayerData,
    PlayerInfo,
    ServerConfig,
    ServerDetails,
)
from evrimactl.core.parsers import parse_player_data, parse_players, parse_server_details
from evrimactl.core.session import RconSession, Sleep, TransportFactory
from evrimactl.core.validation import (
    is_valid_steam_id,
    validate_client_options,
    validate_server_config,
)

__all__ = [
    "EvrimactlError",
    "ConfigLoadError",
    "ConfigValidationError",
    "ErrorKind",
    "RconError",
    "AuthFailedError",
    "ConnectionFailedError",
    "InvalidCommandError",
    "NotConnectedError",
    "RconTimeoutError",
    "SocketError",
    "ClientOptions",
    "CommandDefinition",
    "CommandInput",
    "CommandResult",
    "ConnectionState",
    "PlayerData",
    "PlayerInfo",
    "ServerConfig",
    "ServerDetails",
    "all_commands",
    "code_for",
    "commands_by_category",
    "definition_for",
    "is_known",
    "Client",
    "rcon",
]


def _toggle(enabled: bool) -> str:
    return "1" if enabled else "0"


def _require_steam_id(steam_id: str) -> None:
    if not is_valid_steam_id(steam_id):
        raise InvalidCommandError(f"Invalid Steam ID: {steam_id}")


def _with_reason(steam_id: str, reason: str | None) -> str:
    return f"{steam_id},{reason}" if reason else steam_id


class Client:
    """Public client for one Evrima server.

    A `Client` validates its connection parameters, owns a single
    `RconSession`, and adds typed convenience methods for each command.

    Example::

        async with Client("192.168.1.100", 8888, "secret", auto_reconnect=True) as client:
            await client.announce("Restart in 5 minutes")
            players = await client.get_players()
    """

    def __init__(
        self,
        host: str,
        port: int,
        password: str,
        *,
        transport_factory: TransportFactory | None = None,
        sleep: Sleep | None = None,
        **options: Any,
    ) -> None:
        config = validate_server_config({"host": host, "port": port, "password": password})
        self._session = RconSession(
            config,
            validate_client_options(options),
            transport_factory=transport_factory,
            sleep=sleep,
        )

    @classmethod
    def from_inventory(
        cls,
        name: str,
        path: Path | None = None,
        *,
        transport_factory: TransportFactory | None = None,
        **overrides: Any,
    ) -> Client:
        """Build a client for inventory entry ``name``; ``overrides`` win over its options."""
        loaded = load_servers(path)
        entry = loaded.servers.get(name)
        if entry is None:
            available = ", ".join(sorted(loaded.servers)) or "<none>"
            raise ConfigValidationError(f"Unknown server '{name}'. Available: {available}")
        return cls(
            entry.config.host,
            entry.config.port,
            entry.config.password,
            transport_factory=transport_factory,
            **{**asdict(entry.options), **overrides},
        )

    @property
    def session(self) -> RconSession:
        return self._session

    @property
    def state(self) -> ConnectionState:
        return self._session.state

    @property
    def is_connected(self) -> bool:
        return self._session.is_connected

    async def __aenter__(self) -> Client:
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.disconnect()

    async def connect(self) -> bool:
        return await self._session.connect()

    def disconnect(self) -> None:
        self._session.disconnect()

    async def send_command(self, command: str, params: str | None = None) -> CommandResult:
        return await self._session.send_command(command, params)

    async def batch(self, commands: Iterable[CommandInput | tuple[str, str | None]]) -> list[CommandResult]:
        return await self._session.batch(commands)

    # server management

    async def announce(self, message: str) -> CommandResult:
        return await self.send_command("announce", message)

    async def direct_message(self, steam_id: str, message: str) -> CommandResult:
        _require_steam_id(steam_id)
        return await self.send_command("dm", f"{steam_id},{message}")

    async def get_server_details(self) -> ServerDetails:
        result = await self.send_command("srv:details")
        return parse_server_details(result.raw)

    async def wipe_corpses(self) -> CommandResult:
        return await self.send_command("entities:wipe:corpses")

    async def get_playables(self) -> CommandResult:
        return await self.send_command("getplayables")

    async def update_playables(self, config: str) -> CommandResult:
        return await self.send_command("updateplayables", config)

    async def set_migrations(self, enabled: bool) -> CommandResult:
        return await self.send_command("migrations:toggle", _toggle(enabled))

    async def save(self) -> CommandResult:
        return await self.send_command("save")

    async def set_paused(self, paused: bool) -> CommandResult:
        return await self.send_command("pause", _toggle(paused))

    # players

    async def get_players(self) -> tuple[PlayerInfo, ...]:
        result = await self.send_command("players")
        return parse_players(result.raw)

    async def get_player_data(self, steam_id: str | None = None) -> PlayerData:
        if steam_id is not None:
            _require_steam_id(steam_id)
        result = await self.send_command("playData", steam_id)
        return parse_player_data(result.raw)

    async def ban(self, steam_id: str, reason: str | None = None) -> CommandResult:
        _require_steam_id(steam_id)
        return await self.send_command("ban", _with_reason(steam_id, reason))

    async def kick(self, steam_id: str, reason: str | None = None) -> CommandResult:
        _require_steam_id(steam_id)
        return await self.send_command("kick", _with_reason(steam_id, reason))

    # growth & network

    async def set_growth_multiplier(self, enabled: bool) -> CommandResult:
        return await self.send_command("growth:multiplier:toggle", _toggle(enabled))

    async def set_growth_multiplier_value(self, multiplier: float) -> CommandResult:
        if multiplier < 0:
            raise InvalidCommandError(f"Growth multiplier must be positive, got: {multiplier}")
        return await self.send_command("growth:multiplier:set", str(multiplier))

    async def set_net_update_distance_checks(self, enabled: bool) -> CommandResult:
        return await self.send_command("netupdate:toggle", _toggle(enabled))

    # whitelist

    async def set_whitelist(self, enabled: bool) -> CommandResult:
        return await self.send_command("whitelist:toggle", _toggle(enabled))

    async def whitelist_add(self, steam_id: str) -> CommandResult:
        _require_steam_id(steam_id)
        return await self.send_command("whitelist:add", steam_id)

    async def whitelist_remove(self, steam_id: str) -> CommandResult:
        _require_steam_id(steam_id)
        return await self.send_command("whitelist:remove", steam_id)

    # feature toggles

    async def set_global_chat(self, enabled: bool) -> CommandResult:
        return await self.send_command("globalchat:toggle", _toggle(enabled))

    async def set_humans(self, enabled: bool) -> CommandResult:
        return await self.send_command("humans:toggle", _toggle(enabled))

    # ai

    async def set_ai(self, enabled: bool) -> CommandResult:
        return await self.send_command("ai:toggle", _toggle(enabled))

    async def disable_ai_classes(self, classes: Iterable[str]) -> CommandResult:
        return await self.send_command("ai:classes:disable", ",".join(classes))

    async def set_ai_density(self, density: float) -> CommandResult:
        if not 0 <= density <= 1:
            raise InvalidCommandError(f"AI density must be between 0.0 and 1.0, got: {density}")
        return await self.send_command("ai:density", str(density))

    async def get_queue_status(self) -> CommandResult:
        return await self.send_command("queue:status")

    async def set_ai_learning(self, enabled: bool) -> CommandResult:
        return await self.send_command("ai:learning:toggle", _toggle(enabled))

    async def custom(self, command_string: str) -> CommandResult:
        return await self.send_command("custom", command_string)


async def rcon(
    host: str,
    port: int,
    password: str,
    command: str,
    params: str | None = None,
    **options: Any,
) -> CommandResult:
    """Connect, run one command, and disconnect."""
    if not is_known(command):
        raise InvalidCommandError(f"Invalid command: {command}")

    client = Client(host, port, password, **options)
    try:
        await client.connect()
        return await client.send_command(command, params)
    finally:
        client.disconnect()
