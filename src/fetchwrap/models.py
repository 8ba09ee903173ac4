"""Canonical Pydantic models shared across fetchwrap.

The models fall into two groups:

**Request options** -- :class:`Options`, the immutable configuration record
describing one request's behaviour, plus :class:`HTTPMethod`.

**Persisted configuration** -- serialised as JSON in the user's config
directory: :class:`DefaultsConfig`, :class:`OutputConfig`, and
:class:`GlobalConfig`.

All models use Pydantic v2. :class:`Options` is frozen and accepts unknown
keys (``extra="allow"``); those keys are forwarded verbatim to the
transport, so a transport can define its own settings without changes here.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Callable, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fetchwrap.signals import AbortSignal


class HTTPMethod(str, enum.Enum):
    """HTTP methods with a shorthand on :class:`~fetchwrap.client.instance.Instance`."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    HEAD = "HEAD"
    DELETE = "DELETE"


Credentials = Literal["omit", "same-origin", "include"]


class Options(BaseModel):
    """Configuration for a single request or a whole instance lineage.

    Every field is optional. A field counts as *present* when it was given
    explicitly and is not ``None``; only present fields take part in
    :func:`~fetchwrap.options.merge_options`.

    Header names are lower-cased on construction so that ``Accept`` and
    ``accept`` refer to the same entry. ``headers`` and mapping
    ``query_params`` are stored as read-only snapshots (lists of pairs as
    tuples), so neither the caller nor a derived instance can change them.

    ``timeout`` is in seconds and may be fractional.

    Example::

        Options(
            prefix_url="https://api.example.com",
            headers={"Authorization": "Bearer abc"},
            timeout=2.5,  # seconds
        )
    """

    model_config = ConfigDict(
        extra="allow",
        frozen=True,
        arbitrary_types_allowed=True,
    )

    method: Optional[HTTPMethod] = None
    json_body: Any = Field(
        default=None, description="Value serialised with json.dumps as the request body"
    )
    query_params: Any = Field(
        default=None, description="Value passed to `serialize` to build the query string"
    )
    timeout: Optional[float] = Field(
        default=None, ge=0, description="Seconds before TimeoutError_; 0 disables"
    )
    prefix_url: Optional[str] = Field(
        default=None, description="String prepended to every request target"
    )
    headers: Optional[Mapping[str, str]] = None
    serialize: Optional[Callable[[Any], str]] = None
    on_response: Optional[Callable[..., Any]] = None
    on_success: Optional[Callable[..., Any]] = None
    on_failure: Optional[Callable[..., Any]] = None
    signal: Optional[AbortSignal] = None
    credentials: Optional[Credentials] = None
    body: Any = None

    @field_validator("method", mode="before")
    @classmethod
    def _upper_method(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.upper()
        return value

    @field_validator("headers", mode="before")
    @classmethod
    def _lower_header_names(cls, value: Any) -> Any:
        if isinstance(value, Mapping):
            return {str(k).lower(): str(v) for k, v in value.items()}
        return value

    @field_validator("headers", mode="after")
    @classmethod
    def _freeze_headers(cls, value: Any) -> Any:
        if value is None:
            return value
        return MappingProxyType(dict(value))

    @field_validator("query_params", mode="after")
    @classmethod
    def _freeze_query_params(cls, value: Any) -> Any:
        if isinstance(value, Mapping):
            return MappingProxyType(dict(value))
        if isinstance(value, list):
            return tuple(value)
        return value

    def present(self) -> dict[str, Any]:
        """Return the explicitly given, non-``None`` fields (extras included)."""
        extra = self.model_extra or {}
        out: dict[str, Any] = {}
        for name in self.model_fields_set | set(extra):
            # extras may shadow BaseModel attributes such as json or copy
            value = extra[name] if name in extra else self.__dict__.get(name)
            if value is not None:
                out[name] = value
        return out

    @property
    def extra(self) -> dict[str, Any]:
        """Unknown fields that are passed through to the transport."""
        return {k: v for k, v in (self.model_extra or {}).items() if v is not None}


OptionsLike = Optional[Options | Mapping[str, Any]]


# --- Persisted configuration ---


class DefaultsConfig(BaseModel):
    """Base request options applied by the CLI to every request."""

    prefix_url: str = Field(default="", description="Prefix prepended to request targets")
    headers: dict[str, str] = Field(default_factory=dict)
    timeout: float = Field(default=0.0, ge=0, description="Request timeout in seconds; 0 disables")
    credentials: Credentials = "same-origin"
    verify_ssl: bool = Field(default=True, description="Verify TLS certificates")
    follow_redirects: bool = True


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/fetchwrap/config.json``.

    Loaded and saved by :func:`~fetchwrap.config.load_global_config` and
    :func:`~fetchwrap.config.save_global_config`. See
    :func:`~fetchwrap.config.resolve_config` for the precedence chain.
    """

    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
