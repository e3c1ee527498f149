from __future__ import annotations

import pytest

from evrimactl.core.model import PlayerInfo
from evrimactl.core.parsers import (
    parse_bool,
    parse_key_values,
    parse_player_data,
    parse_players,
    parse_server_details,
)


def test_columnar_player_list() -> None:
    players = parse_players("PlayerList\n111,222,\nAlice,Bob,\nE1,E2,")
    assert players == (
        PlayerInfo(steam_id="111", name="Alice", eos_id="E1"),
        PlayerInfo(steam_id="222", name="Bob", eos_id="E2"),
    )


def test_missing_secondary_column_yields_none() -> None:
    players = parse_players("PlayerList\n111,222,\nAlice,Bob,")
    assert [p.eos_id for p in players] == [None, None]
    assert [p.name for p in players] == ["Alice", "Bob"]


def test_player_list_without_header_and_with_terminator() -> None:
    players = parse_players("111, 222\nAlice , Bob\nE1\x00")
    assert players[0] == PlayerInfo(steam_id="111", name="Alice", eos_id="E1")
    assert players[1] == PlayerInfo(steam_id="222", name="Bob", eos_id=None)


def test_player_names_keep_latin1_control_bytes() -> None:
    text = b"PlayerList\n111,222,\nAl\x85ce,Bob,\nE1,E2,\x00".decode("latin-1")
    assert parse_players(text) == (
        PlayerInfo(steam_id="111", name="Al\x85ce", eos_id="E1"),
        PlayerInfo(steam_id="222", name="Bob", eos_id="E2"),
    )


def test_first_column_decides_record_count() -> None:
    players = parse_players("PlayerList\n111,\nAlice,Bob,Carol,\nE1,E2,")
    assert len(players) == 1


@pytest.mark.parametrize("text", ["", "PlayerList", "PlayerList\n\n", "\x00"])
def test_empty_player_list(text: str) -> None:
    assert parse_players(text) == ()


@pytest.mark.parametrize("text", ["name:Foo,map:X", "name=Foo\nmap=X"])
def test_key_values_accept_both_separators(text: str) -> None:
    assert parse_key_values(text) == {"name": "Foo", "map": "X"}
    assert parse_server_details(text).raw == text


def test_key_values_split_on_first_separator_only() -> None:
    pairs = parse_key_values("Time: 12:30\nURL=a=b")
    assert pairs == {"time": "12:30", "url": "a=b"}


def test_key_values_keep_list_values_intact() -> None:
    assert parse_key_values("Mutations: a,b,c\nName: X") == {"mutations": "a,b,c", "name": "X"}


@pytest.mark.parametrize("byte", ["\x1c", "\x1d", "\x1e", "\x0b", "\x0c", "\x85"])
def test_key_values_split_only_on_newline(byte: str) -> None:
    assert parse_key_values(f"name:Fo{byte}o\nmap:X") == {"name": f"Fo{byte}o", "map": "X"}


def test_key_values_accept_crlf() -> None:
    assert parse_key_values("name:Foo\r\nmap:X\r\n") == {"name": "Foo", "map": "X"}


def test_key_values_ignore_garbage() -> None:
    assert parse_key_values("no separators here\n:\n, ,") == {}


def test_server_details() -> None:
    raw = "name:Test Evrima Server,players:3/100,map:Isla Spiro,version:0.14.52.1,motd:hi\x00"
    details = parse_server_details(raw)
    assert details.name == "Test Evrima Server"
    assert details.player_count == 3
    assert details.max_players == 100
    assert details.map == "Isla Spiro"
    assert details.version == "0.14.52.1"
    assert details.raw == raw


def test_server_details_tolerates_bad_numbers() -> None:
    details = parse_server_details("players:many/lots")
    assert details.player_count is None
    assert details.max_players is None
    assert details.name is None


def test_player_data_block() -> None:
    raw = (
        "PlayerData\nSteamId: 76561198012345678\nName: TestPlayer1\nCharacter: Carnotaurus\n"
        "IsAlive: true\nMutations: Hematophagy, Reabsorption,\nIsPrime: 0\nGrowth: 0.75\n"
        "Unknown: ignored\nPlayerDataEnd\n"
    )
    data = parse_player_data(raw)
    assert data.steam_id == "76561198012345678"
    assert data.name == "TestPlayer1"
    assert data.character == "Carnotaurus"
    assert data.is_alive is True
    assert data.is_prime is False
    assert data.mutations == ("Hematophagy", "Reabsorption")
    assert data.growth == 0.75
    assert data.eos_id is None
    assert data.raw == raw


def test_player_data_without_markers() -> None:
    data = parse_player_data("name=Rex\nprime=1")
    assert data.name == "Rex"
    assert data.is_prime is True


@pytest.mark.parametrize(
    ("value", "expected"),
    [("1", True), ("true", True), (" TRUE ", True), ("0", False), ("yes", False), (None, None)],
)
def test_parse_bool(value: str | None, expected: bool | None) -> None:
    assert parse_bool(value) is expected
