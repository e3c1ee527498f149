"""Parsers turning raw RCON response text into structured records.

Every parser is pure and never raises: missing fields become ``None``.
"""

from __future__ import annotations

import re

from evrimactl.core.model import PlayerData, PlayerInfo, ServerDetails
from evrimactl.core.protocol import strip_terminator

PLAYER_LIST_HEADER = "playerlist"
PLAYER_DATA_START = "PlayerData"
PLAYER_DATA_END = "PlayerDataEnd"

_PAIR_SPLIT_RE = re.compile(r",(?=[^,:=\n]+[:=])")
_SEPARATOR_RE = re.compile(r"[:=]")
_TRUTHY = {"1", "true"}


def _columns(line: str) -> list[str]:
    return [token.strip() for token in line.split(",") if token.strip()]


def parse_players(text: str) -> tuple[PlayerInfo, ...]:
    """Parse the columnar ``players`` response.

    Each line carries one attribute for every player: Steam IDs, then names,
    then EOS IDs. The first column decides how many records there are.
    """
    lines = [line.strip() for line in strip_terminator(text).split("\n") if line.strip()]
    if lines and lines[0].lower().startswith(PLAYER_LIST_HEADER):
        lines = lines[1:]
    if not lines:
        return ()

    ids = _columns(lines[0])
    names = _columns(lines[1]) if len(lines) > 1 else []
    eos_ids = _columns(lines[2]) if len(lines) > 2 else []

    players: list[PlayerInfo] = []
    for index, steam_id in enumerate(ids):
        players.append(
            PlayerInfo(
                steam_id=steam_id,
                name=names[index] if index < len(names) else "Unknown",
                eos_id=eos_ids[index] if index < len(eos_ids) else None,
            )
        )
    return tuple(players)


def _strip_markers(text: str, start_marker: str | None, end_marker: str | None) -> list[str]:
    lines = [line.strip() for line in text.split("\n") if line.strip()]
    if start_marker and lines and lines[0] == start_marker:
        lines = lines[1:]
    if end_marker and lines and lines[-1] == end_marker:
        lines = lines[:-1]
    return lines


def parse_key_values(
    text: str,
    start_marker: str | None = None,
    end_marker: str | None = None,
) -> dict[str, str]:
    """Split ``key:value`` / ``key=value`` pairs separated by newlines or commas.

    A comma only starts a new pair when the next segment has its own separator,
    so list values such as ``mutations: a,b,c`` stay intact.
    """
    pairs: dict[str, str] = {}
    for line in _strip_markers(strip_terminator(text), start_marker, end_marker):
        for segment in _PAIR_SPLIT_RE.split(line):
            parts = _SEPARATOR_RE.split(segment, maxsplit=1)
            if len(parts) != 2:
                continue
            key, value = parts[0].strip().lower(), parts[1].strip()
            if key:
                pairs[key] = value
    return pairs


def _normalize_key(key: str) -> str:
    return key.replace(" ", "").replace("_", "")


def parse_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def parse_float(value: str | None) -> float | None:
    if value is None:
        return None
    try:
        return float(value.strip())
    except ValueError:
        return None


def parse_bool(value: str | None) -> bool | None:
    if value is None:
        return None
    return value.strip().lower() in _TRUTHY


def parse_list(value: str | None) -> tuple[str, ...] | None:
    if value is None:
        return None
    return tuple(_columns(value))


def parse_server_details(text: str) -> ServerDetails:
    fields = {_normalize_key(k): v for k, v in parse_key_values(text).items()}

    player_count = parse_int(fields.get("playercount") or fields.get("currentplayers"))
    max_players = parse_int(fields.get("maxplayers"))
    players = fields.get("players")
    if players is not None:
        current, _, maximum = players.partition("/")
        player_count = parse_int(current) if player_count is None else player_count
        max_players = parse_int(maximum) if max_players is None else max_players

    return ServerDetails(
        raw=text,
        name=fields.get("name") or fields.get("servername"),
        player_count=player_count,
        max_players=max_players,
        map=fields.get("map") or fields.get("servermap"),
        version=fields.get("version") or fields.get("serverversion"),
    )


def parse_player_data(text: str) -> PlayerData:
    fields = {
        _normalize_key(k): v
        for k, v in parse_key_values(text, PLAYER_DATA_START, PLAYER_DATA_END).items()
    }

    def first(*keys: str) -> str | None:
        for key in keys:
            if key in fields:
                return fields[key]
        return None

    return PlayerData(
        raw=text,
        steam_id=first("steamid", "id"),
        name=first("name", "playername"),
        eos_id=first("eosid"),
        character=first("character", "class", "dinosaur"),
        is_alive=parse_bool(first("isalive", "alive")),
        mutations=parse_list(first("mutations")),
        is_prime=parse_bool(first("isprime", "prime", "primeelder")),
        growth=parse_float(first("growth")),
    )
