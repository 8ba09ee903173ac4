"""Baseline policy merged beneath every request's options.

:data:`DEFAULT_OPTIONS` supplies the behaviour a caller gets without
configuring anything: no prefix, same-origin credentials, standard query
encoding, raise on non-2xx, and passthrough success/failure hooks.
"""

from __future__ import annotations

from typing import Any

import httpx

from fetchwrap.exceptions import ResponseError
from fetchwrap.models import Options


def default_serialize(params: Any) -> str:
    """Encode *params* as a standard ``key=value&...`` query string.

    Mappings, sequences of pairs and pre-encoded strings are accepted.
    Sequence values repeat the key (``{"a": [1, 2]}`` -> ``a=1&a=2``).
    """
    if isinstance(params, str):
        return params.lstrip("?")
    return str(httpx.QueryParams(params))


def default_on_response(response: Any) -> Any:
    """Pass 2xx responses through; raise :class:`ResponseError` otherwise."""
    if response.ok:
        return response
    raise ResponseError(response)


def default_on_success(response: Any) -> Any:
    return response


def default_on_failure(error: BaseException) -> Any:
    raise error


DEFAULT_OPTIONS = Options(
    prefix_url="",
    credentials="same-origin",
    serialize=default_serialize,
    on_response=default_on_response,
    on_success=default_on_success,
    on_failure=default_on_failure,
)
