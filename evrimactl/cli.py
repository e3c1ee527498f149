"""Typer CLI entrypoint."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, TypeVar

import typer

from evrimactl.api import Client
from evrimactl.core.commands import CATEGORIES, REGISTRY, commands_by_category
from evrimactl.core.errors import EvrimactlError
from evrimactl.core.inventory import load_servers

app = typer.Typer(help="Remote console for The Isle: Evrima servers")

T = TypeVar("T")


@dataclass
class Target:
    server: str | None = None
    host: str | None = None
    port: int = 8888
    password: str | None = None
    inventory: Path | None = None
    auto_reconnect: bool = False
    timeout_ms: int | None = None
    debug: bool = False

    def option_overrides(self) -> dict[str, Any]:
        """Client options set explicitly on the command line."""
        options: dict[str, Any] = {}
        if self.auto_reconnect:
            options["auto_reconnect"] = True
        if self.timeout_ms is not None:
            options["timeout_ms"] = self.timeout_ms
        if self.debug:
            options["debug"] = True
        return options


def _build_client(target: Target) -> Client:
    options = target.option_overrides()
    if target.server:
        return Client.from_inventory(target.server, target.inventory, **options)
    if not target.host or not target.password:
        raise typer.BadParameter("Pass --server NAME, or --host together with --password")
    return Client(target.host, target.port, target.password, **options)


def _run(ctx: typer.Context, action: Callable[[Client], Awaitable[T]]) -> T:
    async def _session() -> T:
        client = _build_client(ctx.obj)
        try:
            await client.connect()
            return await action(client)
        finally:
            client.disconnect()

    try:
        return asyncio.run(_session())
    except EvrimactlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.callback()
def main(
    ctx: typer.Context,
    server: str | None = typer.Option(None, "--server", "-s", help="Server name from the inventory"),
    host: str | None = typer.Option(None, "--host", help="Server IP or hostname"),
    port: int = typer.Option(8888, "--port", help="RCON port"),
    password: str | None = typer.Option(
        None, "--password", envvar="EVRIMA_RCON_PASSWORD", help="RCON password"
    ),
    inventory: Path | None = typer.Option(None, "--inventory", help="Path to servers.yaml"),
    auto_reconnect: bool = typer.Option(False, "--auto-reconnect", help="Reconnect with backoff"),
    timeout_ms: int | None = typer.Option(None, "--timeout-ms", help="Per-operation timeout"),
    debug: bool = typer.Option(False, "--debug", help="Verbose protocol logging"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = Target(
        server=server,
        host=host,
        port=port,
        password=password,
        inventory=inventory,
        auto_reconnect=auto_reconnect,
        timeout_ms=timeout_ms,
        debug=debug,
    )


@app.command("commands")
def list_commands() -> None:
    """List known RCON commands grouped by category."""
    grouped = commands_by_category()
    for category in CATEGORIES:
        names = grouped[category]
        if not names:
            continue
        typer.echo(f"{category}:")
        for name in names:
            definition = REGISTRY[name]
            marker = " <params>" if definition.requires_params else ""
            typer.echo(f"  0x{definition.code:02x} {name}{marker}: {definition.description}")


@app.command("servers")
def list_servers(ctx: typer.Context) -> None:
    """List servers configured in the inventory file."""
    try:
        loaded = load_servers(ctx.obj.inventory)
    except EvrimactlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None

    for warning in loaded.warnings:
        typer.echo(f"Warning: {warning}", err=True)
    if not loaded.servers:
        typer.echo("No servers configured")
        return
    for name, entry in loaded.servers.items():
        typer.echo(f"{name}: {entry.config.address}")


@app.command("send")
def send(
    ctx: typer.Context,
    command: str,
    params: str | None = typer.Argument(None),
) -> None:
    """Send COMMAND with optional PARAMS and print the raw response."""
    result = _run(ctx, lambda client: client.send_command(command, params))
    if not result.success:
        typer.echo(f"Error: {result.data}", err=True)
        raise typer.Exit(code=1)
    typer.echo(result.raw.rstrip("\x00"))


@app.command("announce")
def announce(ctx: typer.Context, message: str) -> None:
    """Broadcast MESSAGE to every player."""
    result = _run(ctx, lambda client: client.announce(message))
    typer.echo(result.raw.rstrip("\x00"))


@app.command("players")
def players(ctx: typer.Context) -> None:
    """List online players."""
    online = _run(ctx, lambda client: client.get_players())
    if not online:
        typer.echo("No players online")
        return
    for player in online:
        eos = f" eos={player.eos_id}" if player.eos_id else ""
        typer.echo(f"{player.steam_id} {player.name}{eos}")


@app.command("details")
def details(ctx: typer.Context) -> None:
    """Show server name, map, version, and player counts."""
    info = _run(ctx, lambda client: client.get_server_details())
    typer.echo(f"name: {info.name or '<unknown>'}")
    typer.echo(f"map: {info.map or '<unknown>'}")
    typer.echo(f"version: {info.version or '<unknown>'}")
    if info.player_count is not None:
        limit = f"/{info.max_players}" if info.max_players is not None else ""
        typer.echo(f"players: {info.player_count}{limit}")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
