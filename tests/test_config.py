"""Tests for fetchwrap.config -- XDG paths, atomic writes, precedence."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from fetchwrap.config import (
    _atomic_write,
    defaults_to_options,
    get_config_dir,
    get_data_dir,
    global_config_path,
    load_global_config,
    resolve_config,
    save_global_config,
)
from fetchwrap.exceptions import ConfigError
from fetchwrap.models import DefaultsConfig, GlobalConfig


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_json(path: Path, data: Any) -> None:
    """Write a dict as JSON to *path*, creating parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


# ---------------------------------------------------------------------------
# XDG path resolution
# ---------------------------------------------------------------------------


class TestXDGPaths:
    def test_config_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("fetchwrap.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        result = get_config_dir()
        assert result == tmp_path / ".config" / "fetchwrap"
        assert result.is_dir()

    def test_config_dir_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        custom = tmp_path / "custom_config"
        monkeypatch.setattr("fetchwrap.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(custom))

        assert get_config_dir() == custom / "fetchwrap"

    def test_data_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("fetchwrap.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_DATA_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_data_dir() == tmp_path / ".local" / "share" / "fetchwrap"

    def test_fallback_platform(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("fetchwrap.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_config_dir() == tmp_path / ".fetchwrap"
        assert get_data_dir() == tmp_path / ".fetchwrap" / "logs"


# ---------------------------------------------------------------------------
# Atomic writes
# ---------------------------------------------------------------------------


class TestAtomicWrite:
    def test_writes_content(self, tmp_path: Path) -> None:
        target = tmp_path / "nested" / "file.json"
        _atomic_write(target, '{"a": 1}')
        assert target.read_text(encoding="utf-8") == '{"a": 1}'

    def test_overwrites_and_leaves_no_temp_files(self, tmp_path: Path) -> None:
        target = tmp_path / "file.json"
        _atomic_write(target, "one")
        _atomic_write(target, "two")

        assert target.read_text(encoding="utf-8") == "two"
        assert [p.name for p in tmp_path.iterdir()] == ["file.json"]

    def test_failure_keeps_original(self, tmp_path: Path) -> None:
        target = tmp_path / "file.json"
        _atomic_write(target, "original")

        with patch("fetchwrap.config.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(OSError, match="disk full"):
                _atomic_write(target, "new")

        assert target.read_text(encoding="utf-8") == "original"
        assert [p.name for p in tmp_path.iterdir()] == ["file.json"]


# ---------------------------------------------------------------------------
# Global config
# ---------------------------------------------------------------------------


class TestGlobalConfig:
    def test_defaults_when_missing(self, isolated_config: Path) -> None:
        config = load_global_config()
        assert config == GlobalConfig()
        assert config.defaults.credentials == "same-origin"
        assert config.defaults.timeout == 0

    def test_round_trip(self, isolated_config: Path) -> None:
        config = GlobalConfig(
            defaults=DefaultsConfig(prefix_url="https://api.test", headers={"x-key": "1"}, timeout=2.5)
        )
        save_global_config(config)

        assert global_config_path() == isolated_config / "config" / "fetchwrap" / "config.json"
        assert load_global_config() == config

    def test_invalid_json(self, isolated_config: Path) -> None:
        global_config_path().write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid global config"):
            load_global_config()

    def test_invalid_values(self, isolated_config: Path) -> None:
        _write_json(global_config_path(), {"defaults": {"timeout": -1}})
        with pytest.raises(ConfigError):
            load_global_config()


# ---------------------------------------------------------------------------
# Precedence
# ---------------------------------------------------------------------------


class TestResolveConfig:
    def test_stored_values(self, isolated_config: Path) -> None:
        _write_json(global_config_path(), {"defaults": {"prefix_url": "https://file.test", "timeout": 1}})

        config = resolve_config()

        assert config.defaults.prefix_url == "https://file.test"
        assert config.defaults.timeout == 1

    def test_env_beats_file(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _write_json(global_config_path(), {"defaults": {"prefix_url": "https://file.test", "timeout": 1}})
        monkeypatch.setenv("FETCHWRAP_PREFIX_URL", "https://env.test")
        monkeypatch.setenv("FETCHWRAP_TIMEOUT", "2.5")

        config = resolve_config()

        assert config.defaults.prefix_url == "https://env.test"
        assert config.defaults.timeout == 2.5

    def test_cli_beats_env(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FETCHWRAP_PREFIX_URL", "https://env.test")
        monkeypatch.setenv("FETCHWRAP_TIMEOUT", "2.5")

        config = resolve_config(cli_prefix_url="https://cli.test", cli_timeout=0)

        assert config.defaults.prefix_url == "https://cli.test"
        assert config.defaults.timeout == 0

    def test_non_numeric_env_timeout(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FETCHWRAP_TIMEOUT", "soon")
        with pytest.raises(ConfigError, match="must be a number"):
            resolve_config()

    def test_negative_env_timeout(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FETCHWRAP_TIMEOUT", "-1")
        with pytest.raises(ConfigError, match="must not be negative"):
            resolve_config()

    def test_does_not_persist(self, isolated_config: Path) -> None:
        resolve_config(cli_prefix_url="https://cli.test")
        assert load_global_config().defaults.prefix_url == ""


class TestDefaultsToOptions:
    def test_builds_base_options(self) -> None:
        config = GlobalConfig(
            defaults=DefaultsConfig(
                prefix_url="https://api.test",
                headers={"Authorization": "Bearer t"},
                timeout=3,
                credentials="include",
            )
        )

        options = defaults_to_options(config)

        assert options.prefix_url == "https://api.test"
        assert options.headers == {"authorization": "Bearer t"}
        assert options.timeout == 3
        assert options.credentials == "include"

    def test_headers_not_shared(self) -> None:
        config = GlobalConfig()
        options = defaults_to_options(config)
        config.defaults.headers["late"] = "1"
        assert options.headers == {}
