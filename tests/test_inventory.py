from __future__ import annotations

from pathlib import Path

import pytest

from evrimactl.core.errors import ConfigLoadError, ConfigValidationError
from evrimactl.core.inventory import load_servers


def _write_inventory(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def test_load_from_xdg_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
    monkeypatch.setenv("EU_RCON_PASSWORD", "from-env")
    _write_inventory(
        tmp_path / "cfg" / "evrimactl" / "servers.yaml",
        """
servers:
  us-west:
    host: 10.0.0.5
    port: 8888
    password: secret
    options:
      auto_reconnect: true
      max_reconnect_attempts: 5
  eu:
    host: eu.example.com
    port: 9999
    password_env: EU_RCON_PASSWORD
    options:
      name: Europe
""",
    )

    loaded = load_servers()
    assert list(loaded.servers) == ["eu", "us-west"]

    us = loaded.servers["us-west"]
    assert us.config.host == "10.0.0.5"
    assert us.config.password == "secret"
    assert us.options.auto_reconnect is True
    assert us.options.max_reconnect_attempts == 5
    assert us.options.name == "us-west"

    eu = loaded.servers["eu"]
    assert eu.config.password == "from-env"
    assert eu.options.name == "Europe"
    assert any("us-west" in w for w in loaded.warnings)


def test_missing_default_inventory_is_empty(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "nothing"))
    loaded = load_servers()
    assert loaded.servers == {}
    assert loaded.source is None


def test_missing_explicit_inventory_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigLoadError):
        load_servers(tmp_path / "missing.yaml")


def test_duplicate_keys_rejected(tmp_path: Path) -> None:
    path = _write_inventory(
        tmp_path / "servers.yaml",
        """
servers:
  main:
    host: 127.0.0.1
    port: 8888
    password: a
  main:
    host: 127.0.0.1
    port: 8889
    password: b
""",
    )
    with pytest.raises(ConfigValidationError):
        load_servers(path)


def test_missing_password_env_rejected(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("NOT_SET_RCON_PASSWORD", raising=False)
    path = _write_inventory(
        tmp_path / "servers.yaml",
        """
servers:
  main:
    host: 127.0.0.1
    port: 8888
    password_env: NOT_SET_RCON_PASSWORD
""",
    )
    with pytest.raises(ConfigValidationError) as exc:
        load_servers(path)
    assert "NOT_SET_RCON_PASSWORD" in str(exc.value)


@pytest.mark.parametrize(
    "content",
    [
        "servers: [1, 2]",
        "- just a list",
        "servers:\n  main:\n    host: 127.0.0.1\n    port: 70000\n    password: x\n",
        "servers:\n  main:\n    host: 127.0.0.1\n    port: 8888\n    password: x\n    options:\n      timeout_ms: 5\n",
        "servers:\n  main: {host: 127.0.0.1, port: 8888}\n",
        "servers: {main: [unclosed",
    ],
)
def test_invalid_inventories_rejected(tmp_path: Path, content: str) -> None:
    path = _write_inventory(tmp_path / "servers.yaml", content)
    with pytest.raises(ConfigValidationError):
        load_servers(path)
