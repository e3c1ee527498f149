"""Command registry: identifier to opcode and metadata.

The table is built once at import and exposed read-only. Identifiers follow the
game's own naming (``srv:details``, ``whitelist:add``); a small alias table maps
descriptive names such as ``server-details`` onto them.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Literal, Mapping

from evrimactl.core.model import CommandDefinition

CommandCategory = Literal["core", "server", "player", "world", "whitelist", "features", "ai"]

CATEGORIES: tuple[CommandCategory, ...] = (
    "core",
    "server",
    "player",
    "world",
    "whitelist",
    "features",
    "ai",
)

_TOGGLE = "1 or 0"

_DEFINITIONS: dict[str, CommandDefinition] = {
    # core protocol
    "auth": CommandDefinition(0x01, "Authenticate with the RCON server", True, "password"),
    "command": CommandDefinition(0x02, "Execute a raw command", True, "any raw command"),
    # server management
    "announce": CommandDefinition(
        0x10, "Send a server-wide announcement to all players", True, "Server will restart in 5 minutes"
    ),
    "dm": CommandDefinition(0x11, "Send a direct message to a specific player", True, "steamId,Your message here"),
    "srv:details": CommandDefinition(0x12, "Retrieve server information and configuration", False),
    "entities:wipe:corpses": CommandDefinition(0x13, "Remove all dead bodies/corpses from the map", False),
    "getplayables": CommandDefinition(0x14, "Get list of available playable dinosaurs/characters", False),
    "updateplayables": CommandDefinition(
        0x15, "Update the playable characters/dinosaurs configuration", True, "dino1:enabled,dino2:disabled"
    ),
    "migrations:toggle": CommandDefinition(0x19, "Toggle dinosaur migrations on/off", True, _TOGGLE),
    # player management
    "ban": CommandDefinition(0x20, "Ban a player from the server", True, "steamId,reason"),
    "growth:multiplier:toggle": CommandDefinition(0x21, "Toggle growth multiplier feature on/off", True, _TOGGLE),
    "growth:multiplier:set": CommandDefinition(0x22, "Set the growth multiplier value", True, "1.5"),
    "netupdate:toggle": CommandDefinition(0x23, "Toggle network update distance checks", True, _TOGGLE),
    "kick": CommandDefinition(0x30, "Kick a player from the server", True, "steamId,reason"),
    "players": CommandDefinition(0x40, "List all players on server (returns SteamId, Name, EOSId)", False),
    # world management
    "save": CommandDefinition(0x50, "Trigger a server save operation", False),
    "pause": CommandDefinition(0x60, "Pause or unpause the server", True, _TOGGLE),
    "custom": CommandDefinition(0x70, "Execute a custom command (may not be functional)", True),
    "playData": CommandDefinition(
        0x77,
        "Get detailed player data (mutations, prime status). Response has PlayerData/PlayerDataEnd markers.",
        False,
    ),
    # whitelist
    "whitelist:toggle": CommandDefinition(0x81, "Enable or disable the server whitelist", True, _TOGGLE),
    "whitelist:add": CommandDefinition(0x82, "Add a player to the whitelist by Steam ID", True, "steamId"),
    "whitelist:remove": CommandDefinition(0x83, "Remove a player from the whitelist by Steam ID", True, "steamId"),
    # feature toggles
    "globalchat:toggle": CommandDefinition(0x84, "Enable or disable global chat for all players", True, _TOGGLE),
    "humans:toggle": CommandDefinition(0x86, "Enable or disable human characters", True, _TOGGLE),
    # ai
    "ai:toggle": CommandDefinition(0x90, "Enable or disable AI spawning on the server", True, _TOGGLE),
    "ai:classes:disable": CommandDefinition(0x91, "Disable specific AI dinosaur classes", True, "raptor,trex,stego"),
    "ai:density": CommandDefinition(0x92, "Set the AI spawn density (0.0 to 1.0)", True, "0.5"),
    "queue:status": CommandDefinition(0x93, "Get the current server queue status", False),
    "ai:learning:toggle": CommandDefinition(
        0x94, "Toggle AI learning behavior on/off (may only work on official servers)", True, _TOGGLE
    ),
}

_ALIASES: dict[str, str] = {
    "direct-message": "dm",
    "server-details": "srv:details",
    "wipe-corpses": "entities:wipe:corpses",
    "get-playables": "getplayables",
    "update-playables": "updateplayables",
    "toggle-migrations": "migrations:toggle",
    "toggle-growth-multiplier": "growth:multiplier:toggle",
    "set-growth-multiplier": "growth:multiplier:set",
    "toggle-net-update-checks": "netupdate:toggle",
    "player-data": "playData",
    "toggle-whitelist": "whitelist:toggle",
    "whitelist-add": "whitelist:add",
    "whitelist-remove": "whitelist:remove",
    "toggle-global-chat": "globalchat:toggle",
    "toggle-humans": "humans:toggle",
    "toggle-ai": "ai:toggle",
    "disable-ai-classes": "ai:classes:disable",
    "set-ai-density": "ai:density",
    "queue-status": "queue:status",
    "toggle-ai-learning": "ai:learning:toggle",
}


def _check_unique_codes(definitions: Mapping[str, CommandDefinition]) -> None:
    seen: dict[int, str] = {}
    for name, definition in definitions.items():
        if not 0 <= definition.code <= 0xFF:
            raise ValueError(f"Opcode for '{name}' does not fit in one byte: {definition.code:#x}")
        if definition.code in seen:
            raise ValueError(
                f"Duplicate opcode {definition.code:#04x} for '{name}' and '{seen[definition.code]}'"
            )
        seen[definition.code] = name


_check_unique_codes(_DEFINITIONS)

REGISTRY: Mapping[str, CommandDefinition] = MappingProxyType(_DEFINITIONS)
ALIASES: Mapping[str, str] = MappingProxyType(_ALIASES)


def canonical_name(command: str) -> str | None:
    if command in REGISTRY:
        return command
    return ALIASES.get(command)


def definition_for(command: str) -> CommandDefinition | None:
    name = canonical_name(command)
    return REGISTRY[name] if name is not None else None


def code_for(command: str) -> int | None:
    definition = definition_for(command)
    return definition.code if definition is not None else None


def is_known(command: str) -> bool:
    return canonical_name(command) is not None


def all_commands() -> list[str]:
    return list(REGISTRY.keys())


def category_for_code(code: int) -> CommandCategory | None:
    if code <= 0x02:
        return "core"
    if 0x10 <= code <= 0x1F:
        return "server"
    if 0x20 <= code <= 0x4F:
        return "player"
    if 0x50 <= code <= 0x7F:
        return "world"
    if 0x81 <= code <= 0x83:
        return "whitelist"
    if 0x84 <= code <= 0x8F:
        return "features"
    if code >= 0x90:
        return "ai"
    return None


def commands_by_category() -> dict[CommandCategory, list[str]]:
    """Group registered commands by opcode range. Purely informational."""
    categories: dict[CommandCategory, list[str]] = {category: [] for category in CATEGORIES}
    for name, definition in REGISTRY.items():
        category = category_for_code(definition.code)
        if category is not None:
            categories[category].append(name)
    return categories
