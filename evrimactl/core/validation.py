"""JSON Schema validation for server configs and client options."""

from __future__ import annotations

import json
import re
from functools import lru_cache
from importlib import resources
from typing import Any, Mapping

from jsonschema import ValidationError, validators

from evrimactl.core.errors import ConfigValidationError
from evrimactl.core.model import ClientOptions, ServerConfig

_STEAM_ID_RE = re.compile(r"^\d{17}$")
_TOGGLE_VALUES = frozenset({"0", "1"})


@lru_cache(maxsize=None)
def load_schema(name: str) -> dict[str, Any]:
    schema_text = resources.files("evrimactl.schemas").joinpath(name).read_text(encoding="utf-8")
    return json.loads(schema_text)


@lru_cache(maxsize=None)
def _schema_validator(name: str) -> Any:
    schema = load_schema(name)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def validate_document(doc: Any, schema_name: str, *, source: str) -> None:
    try:
        _schema_validator(schema_name).validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise ConfigValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc


def _schema_defaults(schema_name: str) -> dict[str, Any]:
    properties = load_schema(schema_name).get("properties", {})
    return {key: spec["default"] for key, spec in properties.items() if "default" in spec}


def validate_server_config(config: Mapping[str, Any]) -> ServerConfig:
    doc = dict(config)
    validate_document(doc, "server.schema.json", source="server config")
    return ServerConfig(host=doc["host"], port=doc["port"], password=doc["password"])


def validate_client_options(options: Mapping[str, Any] | None = None) -> ClientOptions:
    doc = {key: value for key, value in dict(options or {}).items() if value is not None}
    validate_document(doc, "options.schema.json", source="client options")
    merged = {**_schema_defaults("options.schema.json"), **doc}
    return ClientOptions(**merged)


def is_valid_steam_id(steam_id: str) -> bool:
    return bool(_STEAM_ID_RE.match(steam_id))


def is_valid_toggle(value: str) -> bool:
    return value in _TOGGLE_VALUES
