"""HTTP client layer for fetchwrap.

Classes and functions:
    :func:`create` / :class:`Instance` -- configurable, extendable clients.
    :func:`request` / :class:`PendingResult` -- the request executor.
    :class:`HttpxTransport` -- default transport over :class:`httpx.AsyncClient`.
    :class:`FetchResponse` -- fetch-style response with clone and decoders.

Example::

    from fetchwrap.client import create

    api = create(prefix_url="https://api.example.com")
    users = await api.get("/users").json()
"""

from fetchwrap.client.instance import Instance, create
from fetchwrap.client.request import PendingResult, RequestDescriptor, request
from fetchwrap.client.response import Blob, FetchResponse, FormData
from fetchwrap.client.transport import HttpxTransport, Transport

__all__ = [
    "Blob",
    "FetchResponse",
    "FormData",
    "HttpxTransport",
    "Instance",
    "PendingResult",
    "RequestDescriptor",
    "Transport",
    "create",
    "request",
]
