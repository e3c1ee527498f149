"""Core data models used across the codec, session, parsers, and CLI."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    AUTHENTICATING = "authenticating"
    CONNECTED = "connected"
    ERROR = "error"


@dataclass(frozen=True)
class ServerConfig:
    host: str
    port: int
    password: str = field(repr=False)

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"


@dataclass(frozen=True)
class ClientOptions:
    timeout_ms: int = 10000
    auto_reconnect: bool = False
    max_reconnect_attempts: int = 3
    reconnect_delay_ms: int = 1000
    debug: bool = False
    name: str | None = None


@dataclass(frozen=True)
class CommandDefinition:
    code: int
    description: str
    requires_params: bool
    example: str | None = None


@dataclass(frozen=True)
class CommandInput:
    command: str
    params: str | None = None


@dataclass(frozen=True)
class CommandResult:
    success: bool
    data: Any
    raw: str
    timestamp: datetime
    command: str


@dataclass(frozen=True)
class PlayerInfo:
    steam_id: str
    name: str
    eos_id: str | None = None


@dataclass(frozen=True)
class ServerDetails:
    raw: str
    name: str | None = None
    player_count: int | None = None
    max_players: int | None = None
    map: str | None = None
    version: str | None = None


@dataclass(frozen=True)
class PlayerData:
    raw: str
    steam_id: str | None = None
    name: str | None = None
    eos_id: str | None = None
    character: str | None = None
    is_alive: bool | None = None
    mutations: tuple[str, ...] | None = None
    is_prime: bool | None = None
    growth: float | None = None
