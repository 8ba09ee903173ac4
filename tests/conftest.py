"""Shared pytest fixtures for the fetchwrap test suite.

Provides config isolation, a reset of the global output manager between
tests, and helpers for building transports backed by
:class:`httpx.MockTransport` so that no test touches the network.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from fetchwrap.client.request import set_default_transport_factory
from fetchwrap.client.transport import HttpxTransport
from fetchwrap.log import LOGGER_NAME
from fetchwrap.output import reset_output


# ---------------------------------------------------------------------------
# Global state reset
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_global_state():
    """Restore the global OutputManager, default transport and package logger after each test."""
    logger = logging.getLogger(LOGGER_NAME)
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    reset_output()
    set_default_transport_factory(None)
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = propagate


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path
    and forces the XDG layout so that tests never touch real user config.
    Clears all FETCHWRAP_* environment variables.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setattr("fetchwrap.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in [
        "FETCHWRAP_PREFIX_URL",
        "FETCHWRAP_TIMEOUT",
        "FETCHWRAP_LOG_LEVEL",
    ]:
        monkeypatch.delenv(var, raising=False)

    return tmp_path


# ---------------------------------------------------------------------------
# Transport fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_transport() -> Callable[[Callable[[httpx.Request], Any]], HttpxTransport]:
    """Factory returning an :class:`HttpxTransport` over ``httpx.MockTransport``.

    The handler may be a plain function or a coroutine function.
    """

    def _make(handler: Callable[[httpx.Request], Any]) -> HttpxTransport:
        return HttpxTransport(transport=httpx.MockTransport(handler))

    return _make


@pytest.fixture
def recorded() -> list[httpx.Request]:
    """List that recording handlers append captured requests to."""
    return []


@pytest.fixture
def echo_transport(
    mock_transport: Callable[[Callable[[httpx.Request], Any]], HttpxTransport],
    recorded: list[httpx.Request],
) -> HttpxTransport:
    """Transport that records each request and answers ``200 {"ok": true}``."""

    def handler(request: httpx.Request) -> httpx.Response:
        recorded.append(request)
        return httpx.Response(200, json={"ok": True})

    return mock_transport(handler)


# ---------------------------------------------------------------------------
# CLI fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
