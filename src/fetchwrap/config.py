"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles the persistent user configuration for fetchwrap:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.fetchwrap/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Global config** -- a single :class:`~fetchwrap.models.GlobalConfig`
  JSON file storing request defaults and the output format.
* **Precedence resolution** -- :func:`resolve_config` layers CLI flags and
  environment variables over the stored config.
* **Options bridge** -- :func:`defaults_to_options` turns the stored request
  defaults into base :class:`~fetchwrap.models.Options` for an instance.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`).
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Optional

from fetchwrap.exceptions import ConfigError
from fetchwrap.models import GlobalConfig, Options

_APP_NAME = "fetchwrap"
_CONFIG_FILENAME = "config.json"

ENV_PREFIX_URL = "FETCHWRAP_PREFIX_URL"
ENV_TIMEOUT = "FETCHWRAP_TIMEOUT"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/fetchwrap/`` (default ``~/.config/fetchwrap/``).
    On macOS/Windows: ``~/.fetchwrap/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/fetchwrap/`` (default ``~/.local/share/fetchwrap/``).
    On macOS/Windows: ``~/.fetchwrap/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file lives in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX. On failure the temp file
    is removed.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def global_config_path() -> Path:
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the config directory.

    Returns:
        The stored :class:`~fetchwrap.models.GlobalConfig`, or a default
        instance if the file does not exist.

    Raises:
        ConfigError: If the file contains invalid JSON or fails validation.
    """
    path = global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    _atomic_write(global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Precedence resolution ---


def resolve_config(
    cli_prefix_url: Optional[str] = None,
    cli_timeout: Optional[float] = None,
) -> GlobalConfig:
    """Resolve the effective configuration.

    Precedence (high to low):
        1. CLI flags (``cli_prefix_url``, ``cli_timeout``)
        2. Environment variables (``FETCHWRAP_PREFIX_URL``, ``FETCHWRAP_TIMEOUT``)
        3. User config (``~/.config/fetchwrap/config.json``)
        4. Defaults

    Raises:
        ConfigError: If the stored config is invalid or ``FETCHWRAP_TIMEOUT``
            is not a non-negative number.
    """
    config = load_global_config()
    defaults = config.defaults

    env_prefix = os.environ.get(ENV_PREFIX_URL)
    if cli_prefix_url is not None:
        defaults.prefix_url = cli_prefix_url
    elif env_prefix:
        defaults.prefix_url = env_prefix

    env_timeout = os.environ.get(ENV_TIMEOUT)
    if cli_timeout is not None:
        defaults.timeout = cli_timeout
    elif env_timeout:
        try:
            defaults.timeout = float(env_timeout)
        except ValueError as exc:
            raise ConfigError(f"{ENV_TIMEOUT} must be a number, got: {env_timeout}") from exc
        if defaults.timeout < 0:
            raise ConfigError(f"{ENV_TIMEOUT} must not be negative, got: {env_timeout}")

    return config


def defaults_to_options(config: GlobalConfig) -> Options:
    """Build base :class:`~fetchwrap.models.Options` from stored request defaults."""
    defaults = config.defaults
    return Options(
        prefix_url=defaults.prefix_url,
        headers=dict(defaults.headers),
        timeout=defaults.timeout,
        credentials=defaults.credentials,
    )
