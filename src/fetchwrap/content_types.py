"""Content kinds and the media types used to negotiate them.

Every :class:`~fetchwrap.client.request.PendingResult` exposes one decode
accessor per :class:`ContentKind`; invoking an accessor also writes the
matching ``accept`` header value from :data:`CONTENT_TYPES`.
"""

from __future__ import annotations

import enum
from types import MappingProxyType
from typing import Mapping


class ContentKind(str, enum.Enum):
    """Logical body kinds a response can be decoded as.

    Each value is also the name of the decode method on
    :class:`~fetchwrap.client.response.FetchResponse`.
    """

    JSON = "json"
    TEXT = "text"
    FORM_DATA = "form_data"
    ARRAY_BUFFER = "array_buffer"
    BLOB = "blob"


CONTENT_TYPES: Mapping[str, str] = MappingProxyType(
    {
        ContentKind.JSON.value: "application/json",
        ContentKind.TEXT.value: "text/*",
        ContentKind.FORM_DATA.value: "multipart/form-data",
        ContentKind.ARRAY_BUFFER.value: "*/*",
        ContentKind.BLOB.value: "*/*",
    }
)
"""Read-only mapping from content kind to ``Accept``/``Content-Type`` value."""
