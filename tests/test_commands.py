from __future__ import annotations

import pytest

from evrimactl.core.commands import (
    ALIASES,
    REGISTRY,
    all_commands,
    canonical_name,
    code_for,
    commands_by_category,
    definition_for,
    is_known,
)

EXPECTED_CODES = {
    "auth": 0x01,
    "command": 0x02,
    "announce": 0x10,
    "dm": 0x11,
    "srv:details": 0x12,
    "entities:wipe:corpses": 0x13,
    "getplayables": 0x14,
    "updateplayables": 0x15,
    "migrations:toggle": 0x19,
    "ban": 0x20,
    "growth:multiplier:toggle": 0x21,
    "growth:multiplier:set": 0x22,
    "netupdate:toggle": 0x23,
    "kick": 0x30,
    "players": 0x40,
    "save": 0x50,
    "pause": 0x60,
    "custom": 0x70,
    "playData": 0x77,
    "whitelist:toggle": 0x81,
    "whitelist:add": 0x82,
    "whitelist:remove": 0x83,
    "globalchat:toggle": 0x84,
    "humans:toggle": 0x86,
    "ai:toggle": 0x90,
    "ai:classes:disable": 0x91,
    "ai:density": 0x92,
    "queue:status": 0x93,
    "ai:learning:toggle": 0x94,
}


def test_registry_matches_wire_opcodes() -> None:
    assert {name: d.code for name, d in REGISTRY.items()} == EXPECTED_CODES


def test_opcodes_are_unique() -> None:
    codes = [definition.code for definition in REGISTRY.values()]
    assert len(codes) == len(set(codes))


def test_aliases_resolve_to_registered_commands() -> None:
    for alias, target in ALIASES.items():
        assert target in REGISTRY
        assert code_for(alias) == REGISTRY[target].code
    assert canonical_name("direct-message") == "dm"
    assert code_for("server-details") == 0x12


def test_lookup_helpers() -> None:
    assert code_for("players") == 0x40
    assert code_for("nope") is None
    assert definition_for("nope") is None
    definition = definition_for("ban")
    assert definition is not None
    assert definition.requires_params is True
    assert definition.example == "steamId,reason"
    assert definition_for("save").requires_params is False
    assert is_known("whitelist:add")
    assert not is_known("whitelist:clear")


def test_all_commands_lists_canonical_names_only() -> None:
    names = all_commands()
    assert set(names) == set(EXPECTED_CODES)
    assert "server-details" not in names


def test_registry_is_read_only() -> None:
    with pytest.raises(TypeError):
        REGISTRY["new"] = REGISTRY["save"]  # type: ignore[index]


def test_commands_by_category() -> None:
    categories = commands_by_category()
    assert categories["core"] == ["auth", "command"]
    assert "srv:details" in categories["server"]
    assert "players" in categories["player"]
    assert "playData" in categories["world"]
    assert categories["whitelist"] == ["whitelist:toggle", "whitelist:add", "whitelist:remove"]
    assert categories["features"] == ["globalchat:toggle", "humans:toggle"]
    assert "queue:status" in categories["ai"]
    assert sum(len(v) for v in categories.values()) == len(REGISTRY)
