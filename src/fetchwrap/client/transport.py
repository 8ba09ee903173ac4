"""Transport protocol and the default httpx-backed implementation.

A transport is any async callable ``transport(url, init)`` that resolves to
a response object exposing ``ok``, ``status``, ``status_text``,
``headers``, ``clone()``, and the decode methods of
:class:`~fetchwrap.client.response.FetchResponse`.

``init`` is a plain dict built by the request executor. It always carries
``method`` (may be ``None``), ``headers`` and ``body``; it carries
``signal`` when a cancellation token applies, ``credentials``, and every
unknown option key passed through from :class:`~fetchwrap.models.Options`.

A transport that honours ``init["signal"]`` sets ``supports_abort = True``;
the executor only wires timeouts to cancellation for such transports.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Optional, Protocol, runtime_checkable

import httpx

from fetchwrap.client.response import FetchResponse
from fetchwrap.exceptions import AbortError
from fetchwrap.signals import AbortSignal

logger = logging.getLogger(__name__)


@runtime_checkable
class Transport(Protocol):
    """Minimal protocol for sending one request."""

    async def __call__(self, url: str, init: Mapping[str, Any]) -> Any: ...


class HttpxTransport:
    """Send requests with :class:`httpx.AsyncClient` and honour abort signals.

    A fresh ``AsyncClient`` is opened per request unless *client* is given,
    in which case that client is used and never closed here.

    Args:
        client: Optional caller-owned client to send through.
        transport: Optional httpx transport (e.g. :class:`httpx.MockTransport`)
            for the per-request clients.
        verify_ssl: Verify TLS certificates on per-request clients.
        follow_redirects: Follow redirects on per-request clients.

    Example::

        transport = HttpxTransport(transport=httpx.MockTransport(handler))
        api = create(prefix_url="https://api.example.com", transport=transport)
    """

    supports_abort = True

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        verify_ssl: bool = True,
        follow_redirects: bool = True,
    ) -> None:
        self._client = client
        self._transport = transport
        self._verify_ssl = verify_ssl
        self._follow_redirects = follow_redirects

    async def __call__(self, url: str, init: Mapping[str, Any]) -> FetchResponse:
        signal: Optional[AbortSignal] = init.get("signal")
        if signal is not None and signal.aborted:
            raise AbortError(signal.reason)

        if self._client is not None:
            raw = await self._send(self._client, url, init, signal)
        else:
            async with httpx.AsyncClient(
                transport=self._transport,
                verify=self._verify_ssl,
                follow_redirects=self._follow_redirects,
            ) as client:
                raw = await self._send(client, url, init, signal)
        return FetchResponse(raw)

    async def _send(
        self,
        client: httpx.AsyncClient,
        url: str,
        init: Mapping[str, Any],
        signal: Optional[AbortSignal],
    ) -> httpx.Response:
        request = client.build_request(
            init.get("method") or "GET",
            url,
            headers=init.get("headers"),
            content=_encode_body(init.get("body")),
        )
        logger.debug("Sending %s %s", request.method, request.url)

        send_task = asyncio.ensure_future(client.send(request))
        if signal is None:
            return await send_task

        signal.add_listener(send_task.cancel)
        try:
            return await send_task
        except asyncio.CancelledError:
            if signal.aborted:
                raise AbortError(signal.reason) from None
            raise
        finally:
            signal.remove_listener(send_task.cancel)


def _encode_body(body: Any) -> Optional[bytes]:
    if body is None:
        return None
    if isinstance(body, (bytes, bytearray, memoryview)):
        return bytes(body)
    if isinstance(body, str):
        return body.encode("utf-8")
    raise TypeError(f"Unsupported request body type: {type(body).__name__}")
