"""Server inventory loading from YAML files."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml

from evrimactl.core.errors import ConfigLoadError, ConfigValidationError
from evrimactl.core.model import ClientOptions, ServerConfig
from evrimactl.core.validation import (
    validate_client_options,
    validate_document,
    validate_server_config,
)

INVENTORY_FILENAME = "servers.yaml"
LOGGER = logging.getLogger(__name__)


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise ConfigValidationError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


@dataclass(frozen=True)
class ServerEntry:
    name: str
    config: ServerConfig
    options: ClientOptions


@dataclass(frozen=True)
class LoadedServers:
    servers: dict[str, ServerEntry]
    source: Path | None
    warnings: tuple[str, ...] = ()


def default_inventory_path() -> Path:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return xdg_config / "evrimactl" / INVENTORY_FILENAME


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigLoadError(f"Could not read server inventory {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise ConfigValidationError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise ConfigValidationError(f"Server inventory {path} must contain a mapping at root")
    return loaded


def _resolve_password(name: str, entry: dict[str, Any]) -> str:
    if "password" in entry:
        return entry["password"]
    env_name = entry["password_env"]
    password = os.environ.get(env_name)
    if not password:
        raise ConfigValidationError(
            f"Server '{name}' reads its password from ${env_name}, which is not set"
        )
    return password


def _build_entry(name: str, entry: dict[str, Any], source: Path) -> ServerEntry:
    config = validate_server_config(
        {"host": entry["host"], "port": entry["port"], "password": _resolve_password(name, entry)}
    )
    try:
        options = validate_client_options(entry.get("options"))
    except ConfigValidationError as exc:
        raise ConfigValidationError(f"Server '{name}' in {source}: {exc}") from exc
    if options.name is None:
        options = replace(options, name=name)
    return ServerEntry(name=name, config=config, options=options)


def load_servers(path: Path | None = None) -> LoadedServers:
    """Load named servers from ``path`` or the XDG default location.

    A missing default file yields an empty inventory; a missing explicit path is
    an error.
    """
    explicit = path is not None
    source = path if path is not None else default_inventory_path()
    if not source.exists():
        if explicit:
            raise ConfigLoadError(f"Server inventory {source} does not exist")
        LOGGER.debug("No server inventory at %s", source)
        return LoadedServers(servers={}, source=None)

    doc = _read_yaml(source)
    validate_document(doc, "inventory.schema.json", source=str(source))

    servers: dict[str, ServerEntry] = {}
    warnings: list[str] = []
    for name, entry in sorted(doc["servers"].items()):
        server = _build_entry(name, entry, source)
        if "password" in entry:
            warning = f"Server '{name}' stores its password in plain text; consider password_env"
            LOGGER.warning(warning)
            warnings.append(warning)
        servers[name] = server

    return LoadedServers(servers=servers, source=source, warnings=tuple(warnings))
