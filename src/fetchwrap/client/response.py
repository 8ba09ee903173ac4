"""Response object returned by transports, plus the CLI formatting bridge.

:class:`FetchResponse` wraps a fully read :class:`httpx.Response` and
exposes a fetch-style surface: ``status``, ``status_text``, ``ok``,
``headers``, and one async decode method per
:class:`~fetchwrap.content_types.ContentKind`.

A body can be decoded once per response object. Decoding again, or cloning
after the body was used, raises :class:`~fetchwrap.exceptions.BodyUsedError`.
:meth:`FetchResponse.clone` returns an independent object over the same
bytes, which is how :class:`~fetchwrap.client.request.PendingResult` lets
several decode accessors run against one result.

:func:`format_api_response` routes a decoded body through
:mod:`fetchwrap.output` for the ``fetchwrap request`` command.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from dataclasses import dataclass
from email.parser import BytesParser
from email.policy import HTTP
from typing import Any, Optional
from urllib.parse import parse_qsl

import httpx

from fetchwrap.exceptions import BodyUsedError
from fetchwrap.output import get_output


@dataclass(frozen=True)
class Blob:
    """Raw body bytes tagged with the response's media type."""

    content: bytes
    type: str = ""

    @property
    def size(self) -> int:
        return len(self.content)

    def text(self, encoding: str = "utf-8") -> str:
        return self.content.decode(encoding, errors="replace")


class FormData:
    """Ordered multi-valued mapping of form field names to values.

    Text fields decode to ``str``; multipart fields carrying a filename stay
    as ``bytes``.
    """

    def __init__(self, items: Optional[list[tuple[str, str | bytes]]] = None) -> None:
        self._items: list[tuple[str, str | bytes]] = list(items or [])

    def get(self, name: str, default: Any = None) -> Any:
        for key, value in self._items:
            if key == name:
                return value
        return default

    def get_all(self, name: str) -> list[str | bytes]:
        return [value for key, value in self._items if key == name]

    def items(self) -> list[tuple[str, str | bytes]]:
        return list(self._items)

    def keys(self) -> list[str]:
        return list(dict.fromkeys(key for key, _ in self._items))

    def __contains__(self, name: object) -> bool:
        return any(key == name for key, _ in self._items)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FormData):
            return self._items == other._items
        return NotImplemented

    def __repr__(self) -> str:
        return f"FormData({self._items!r})"


class FetchResponse:
    """Fetch-style view over a fully read :class:`httpx.Response`.

    Args:
        raw: The underlying httpx response. Its body must already be
            loaded (the default for non-streaming requests).
    """

    def __init__(self, raw: httpx.Response) -> None:
        self._raw = raw
        self._body_used = False

    # ------------------------------------------------------------------ #
    # Metadata
    # ------------------------------------------------------------------ #

    @property
    def raw(self) -> httpx.Response:
        """The wrapped :class:`httpx.Response`."""
        return self._raw

    @property
    def status(self) -> int:
        return self._raw.status_code

    @property
    def status_text(self) -> str:
        return self._raw.reason_phrase

    @property
    def ok(self) -> bool:
        """``True`` for 2xx statuses."""
        return 200 <= self._raw.status_code < 300

    @property
    def headers(self) -> httpx.Headers:
        return self._raw.headers

    @property
    def url(self) -> str:
        try:
            return str(self._raw.url)
        except RuntimeError:
            # httpx raises when the response was built without a request
            return ""

    @property
    def body_used(self) -> bool:
        return self._body_used

    def clone(self) -> FetchResponse:
        """Return an independent response over the same body bytes.

        Raises:
            BodyUsedError: If this response's body was already decoded.
        """
        if self._body_used:
            raise BodyUsedError("Cannot clone a response whose body is already used")
        return FetchResponse(self._raw)

    # ------------------------------------------------------------------ #
    # Body decoders
    # ------------------------------------------------------------------ #

    async def json(self) -> Any:
        """Decode the body as JSON."""
        self._consume()
        return json.loads(self._raw.text)

    async def text(self) -> str:
        self._consume()
        return self._raw.text

    async def array_buffer(self) -> bytes:
        self._consume()
        return self._raw.content

    async def blob(self) -> Blob:
        self._consume()
        return Blob(self._raw.content, self._raw.headers.get("content-type", ""))

    async def form_data(self) -> FormData:
        """Decode a ``multipart/form-data`` or urlencoded body.

        Raises:
            ValueError: If the body has any other content type.
        """
        self._consume()
        content_type = self._raw.headers.get("content-type", "")
        media_type = content_type.split(";", 1)[0].strip().lower()
        if media_type == "application/x-www-form-urlencoded":
            return FormData(parse_qsl(self._raw.text, keep_blank_values=True))
        if media_type == "multipart/form-data":
            return _parse_multipart(content_type, self._raw.content)
        raise ValueError(f"Cannot decode {media_type or 'untyped'} body as form data")

    def _consume(self) -> None:
        if self._body_used:
            raise BodyUsedError("Response body is already used")
        self._body_used = True

    def __repr__(self) -> str:
        return f"<FetchResponse [{self.status} {self.status_text}]>"


def _parse_multipart(content_type: str, content: bytes) -> FormData:
    """Split a multipart body into fields using the stdlib MIME parser."""
    header = f"Content-Type: {content_type}\r\n\r\n".encode("latin-1")
    message = BytesParser(policy=HTTP).parsebytes(header + content)
    if not message.is_multipart():
        raise ValueError("Malformed multipart/form-data body")

    items: list[tuple[str, str | bytes]] = []
    for part in message.iter_parts():
        name = part.get_param("name", header="content-disposition")
        if name is None:
            continue
        payload = part.get_payload(decode=True) or b""
        if part.get_filename() is not None:
            items.append((str(name), payload))
        else:
            charset = part.get_content_charset() or "utf-8"
            items.append((str(name), payload.decode(charset, errors="replace")))
    return FormData(items)


# ------------------------------------------------------------------ #
# CLI formatting bridge
# ------------------------------------------------------------------ #


async def extract_response_data(response: FetchResponse) -> Any:
    """Extract the body from a response without consuming it.

    Attempts to parse the body as JSON first. If that fails (e.g. the
    response is HTML or plain text), returns the raw text. Returns ``None``
    for responses with no content.
    """
    if not response.raw.content:
        return None

    try:
        return await response.clone().json()
    except ValueError:
        pass

    return await response.clone().text()


def format_api_response(response: FetchResponse, data: Any) -> None:
    """Print the status line to stderr and *data* to stdout.

    Args:
        response: The response whose status is reported.
        data: The decoded body to render; ``None`` prints nothing.
    """
    output = get_output()

    output.info(f"HTTP {response.status} {response.status_text or ''}".rstrip())

    content_type = response.headers.get("content-type", "application/json")

    if data is not None:
        output.print_body(data, content_type)
