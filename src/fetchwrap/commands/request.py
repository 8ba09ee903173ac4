"""Request command -- send one HTTP request from the command line.

``fetchwrap request`` builds an :class:`~fetchwrap.client.instance.Instance`
from the resolved configuration (see :func:`~fetchwrap.config.resolve_config`),
sends a single request with it, and renders the response through
:mod:`fetchwrap.output`: the status line goes to stderr and the decoded body
to stdout.

Failures are reported on stderr and mapped to the exit codes in
:mod:`fetchwrap.exit_codes`.
"""

from __future__ import annotations

import asyncio
import enum
import json
from typing import Any, List, Optional

import httpx
import typer

from fetchwrap.client.instance import Instance, create
from fetchwrap.client.response import extract_response_data, format_api_response
from fetchwrap.client.transport import HttpxTransport
from fetchwrap.exceptions import FetchwrapError, InvalidUsageError, ResponseError
from fetchwrap.exit_codes import EXIT_CONNECTION_ERROR, EXIT_GENERIC_FAILURE
from fetchwrap.models import GlobalConfig, HTTPMethod
from fetchwrap.output import debug, error


class DecodeAs(str, enum.Enum):
    """How the response body is decoded before printing."""

    AUTO = "auto"
    JSON = "json"
    TEXT = "text"
    BYTES = "bytes"


def parse_header(raw: str) -> tuple[str, str]:
    """Split a ``Name: value`` header argument.

    Raises:
        InvalidUsageError: If there is no colon or the name is empty.
    """
    name, sep, value = raw.partition(":")
    if not sep or not name.strip():
        raise InvalidUsageError(f"Invalid header (expected 'Name: value'): {raw}")
    return name.strip(), value.strip()


def parse_param(raw: str) -> tuple[str, str]:
    """Split a ``key=value`` query parameter argument.

    Raises:
        InvalidUsageError: If there is no ``=`` or the key is empty.
    """
    key, sep, value = raw.partition("=")
    if not sep or not key:
        raise InvalidUsageError(f"Invalid parameter (expected 'key=value'): {raw}")
    return key, value


def _make_transport(config: GlobalConfig) -> Any:
    return HttpxTransport(
        verify_ssl=config.defaults.verify_ssl,
        follow_redirects=config.defaults.follow_redirects,
    )


def build_call_options(
    headers: list[str],
    params: list[str],
    json_body: Optional[str],
    data: Optional[str],
) -> dict[str, Any]:
    """Turn raw CLI arguments into per-call option keywords."""
    options: dict[str, Any] = {}
    if headers:
        options["headers"] = dict(parse_header(h) for h in headers)
    if params:
        options["query_params"] = [parse_param(p) for p in params]
    if json_body is not None and data is not None:
        raise InvalidUsageError("--json-body and --data are mutually exclusive")
    if json_body is not None:
        try:
            options["json_body"] = json.loads(json_body)
        except json.JSONDecodeError as exc:
            raise InvalidUsageError(f"--json-body is not valid JSON: {exc}") from exc
    if data is not None:
        options["body"] = data
    return options


async def _execute(
    instance: Instance,
    method: HTTPMethod,
    url: str,
    call_options: dict[str, Any],
    decode: DecodeAs,
) -> None:
    send = getattr(instance, method.value.lower())
    pending = send(url, **call_options)

    data: Any
    if method == HTTPMethod.HEAD:
        response = await pending
        data = None
    elif decode == DecodeAs.AUTO:
        response = await pending
        data = await extract_response_data(response)
    else:
        # accessors must run before the first await so their accept header is sent
        readers = {
            DecodeAs.JSON: pending.json,
            DecodeAs.TEXT: pending.text,
            DecodeAs.BYTES: pending.array_buffer,
        }
        data = await readers[decode]()
        response = await pending

    format_api_response(response, data)


def request_command(
    url: str = typer.Argument(help="Target path or URL (appended to the prefix URL)."),
    method: str = typer.Option("GET", "--method", "-X", help="HTTP method."),
    header: Optional[List[str]] = typer.Option(
        None, "--header", "-H", help="Request header as 'Name: value'. Repeatable."
    ),
    param: Optional[List[str]] = typer.Option(
        None, "--param", "-p", help="Query parameter as 'key=value'. Repeatable."
    ),
    json_body: Optional[str] = typer.Option(
        None, "--json-body", help="JSON document sent as the request body."
    ),
    data: Optional[str] = typer.Option(
        None, "--data", "-d", help="Raw request body."
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", "-t", min=0, help="Timeout in seconds (0 disables)."
    ),
    prefix_url: Optional[str] = typer.Option(
        None, "--prefix-url", help="Prefix prepended to the URL."
    ),
    decode: DecodeAs = typer.Option(
        DecodeAs.AUTO, "--as", help="Decode the body as auto, json, text or bytes."
    ),
) -> None:
    """Send a single HTTP request.

    Example::

        fetchwrap request /users -p page=2 --prefix-url https://api.example.com
        fetchwrap request https://api.example.com/users -X POST --json-body '{"name": "x"}'
    """
    from fetchwrap.config import defaults_to_options, resolve_config

    try:
        try:
            http_method = HTTPMethod(method.upper())
        except ValueError:
            raise InvalidUsageError(f"Unsupported method: {method}") from None

        config = resolve_config(cli_prefix_url=prefix_url, cli_timeout=timeout)
        call_options = build_call_options(header or [], param or [], json_body, data)
        base = defaults_to_options(config)
        debug(f"Base options: prefix_url={base.prefix_url!r} timeout={base.timeout}")

        instance = create(base, transport=_make_transport(config))
        asyncio.run(_execute(instance, http_method, url, call_options, decode))
    except ResponseError as exc:
        error(f"HTTP {exc.status} {exc}")
        raise typer.Exit(code=exc.exit_code) from None
    except FetchwrapError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    except httpx.HTTPError as exc:
        error(f"Request failed: {exc}")
        raise typer.Exit(code=EXIT_CONNECTION_ERROR) from None
    except ValueError as exc:
        error(f"Could not decode response body: {exc}")
        raise typer.Exit(code=EXIT_GENERIC_FAILURE) from None
