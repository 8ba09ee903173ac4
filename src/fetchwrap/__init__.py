"""fetchwrap -- a configurable async HTTP request builder.

fetchwrap layers ergonomic defaults over a plain "send a request, get a
response" transport: base-URL prefixing, query serialisation, JSON bodies,
raise-on-non-2xx, timeouts with cancellation, response hooks, lazy body
decoding, and option inheritance across extended instances.

Typical usage::

    from fetchwrap import create

    api = create(prefix_url="https://api.example.com", timeout=5)
    users = await api.get("/users", query_params={"page": 2}).json()

Modules:
    client: Instances, the request executor, transport and response types.
    options: Option merging rules.
    defaults: Baseline policy applied beneath every request.
    models: Pydantic models (request options and persisted config).
    signals: AbortController / AbortSignal cancellation tokens.
    exceptions: Exception hierarchy and failure predicates.
    app: Typer CLI entry point.
"""

__version__ = "0.1.0"

from fetchwrap.client import (  # noqa: E402
    Blob,
    FetchResponse,
    FormData,
    HttpxTransport,
    Instance,
    PendingResult,
    create,
    request,
)
from fetchwrap.content_types import CONTENT_TYPES, ContentKind  # noqa: E402
from fetchwrap.exceptions import (  # noqa: E402
    AbortError,
    BodyUsedError,
    FetchwrapError,
    ResponseError,
    TimeoutError_,
    is_aborted,
    is_timeout,
)
from fetchwrap.models import HTTPMethod, Options  # noqa: E402
from fetchwrap.options import merge_options  # noqa: E402
from fetchwrap.signals import AbortController, AbortSignal  # noqa: E402

fetch = create()
"""Default instance with empty base options."""

__all__ = [
    "AbortController",
    "AbortError",
    "AbortSignal",
    "Blob",
    "BodyUsedError",
    "CONTENT_TYPES",
    "ContentKind",
    "FetchResponse",
    "FetchwrapError",
    "FormData",
    "HTTPMethod",
    "HttpxTransport",
    "Instance",
    "Options",
    "PendingResult",
    "ResponseError",
    "TimeoutError_",
    "create",
    "fetch",
    "is_aborted",
    "is_timeout",
    "merge_options",
    "request",
    "__version__",
]
