"""Instance factory: reusable clients closing over base options.

An :class:`Instance` owns a frozen :class:`~fetchwrap.models.Options` and a
transport. Calling it (or one of its method shorthands) merges per-call
options over the base and hands off to :func:`~fetchwrap.client.request.request`.

Instances never change after creation. :meth:`Instance.extend` and
:meth:`Instance.create` return a new instance over
``merge_options(self.options, delta)``, so sibling extensions cannot
affect each other or their parent::

    api = create(prefix_url="https://api.example.com", timeout=10)
    admin = api.extend(headers={"Authorization": "Bearer admin"})

    users = await api.get("/users", query_params={"page": 2}).json()
    await admin.delete("/users/42")
"""

from __future__ import annotations

from typing import Any, Optional

from fetchwrap.client.request import PendingResult, request
from fetchwrap.models import HTTPMethod, Options, OptionsLike
from fetchwrap.options import as_options, merge_options


class Instance:
    """Callable client bound to a base configuration.

    Args:
        options: Base options for every request made through this instance.
        transport: Transport shared by this instance and its extensions.
            ``None`` uses the default httpx transport.
    """

    def __init__(self, options: OptionsLike = None, *, transport: Any = None) -> None:
        self._options = as_options(options)
        self._transport = transport

    @property
    def options(self) -> Options:
        """The base options (frozen)."""
        return self._options

    @property
    def transport(self) -> Any:
        return self._transport

    def __call__(self, target: str, options: OptionsLike = None, **kwargs: Any) -> PendingResult:
        """Send a request with no method forced (the transport defaults to GET)."""
        return request(
            target,
            merge_options(self._options, as_options(options, **kwargs)),
            transport=self._transport,
        )

    def _send(
        self, method: HTTPMethod, target: str, options: OptionsLike, kwargs: dict[str, Any]
    ) -> PendingResult:
        call_options = merge_options(Options(method=method), as_options(options, **kwargs))
        return request(
            target,
            merge_options(self._options, call_options),
            transport=self._transport,
        )

    def get(self, target: str, options: OptionsLike = None, **kwargs: Any) -> PendingResult:
        return self._send(HTTPMethod.GET, target, options, kwargs)

    def post(self, target: str, options: OptionsLike = None, **kwargs: Any) -> PendingResult:
        return self._send(HTTPMethod.POST, target, options, kwargs)

    def put(self, target: str, options: OptionsLike = None, **kwargs: Any) -> PendingResult:
        return self._send(HTTPMethod.PUT, target, options, kwargs)

    def patch(self, target: str, options: OptionsLike = None, **kwargs: Any) -> PendingResult:
        return self._send(HTTPMethod.PATCH, target, options, kwargs)

    def head(self, target: str, options: OptionsLike = None, **kwargs: Any) -> PendingResult:
        return self._send(HTTPMethod.HEAD, target, options, kwargs)

    def delete(self, target: str, options: OptionsLike = None, **kwargs: Any) -> PendingResult:
        return self._send(HTTPMethod.DELETE, target, options, kwargs)

    def extend(self, options: OptionsLike = None, **kwargs: Any) -> Instance:
        """Return a new instance whose base is ``merge(self.options, options)``."""
        return Instance(
            merge_options(self._options, as_options(options, **kwargs)),
            transport=self._transport,
        )

    def create(self, options: OptionsLike = None, **kwargs: Any) -> Instance:
        """Alias of :meth:`extend`."""
        return self.extend(options, **kwargs)

    def __repr__(self) -> str:
        return f"Instance(options={self._options!r})"


def create(options: OptionsLike = None, *, transport: Optional[Any] = None, **kwargs: Any) -> Instance:
    """Create a top-level :class:`Instance`.

    Args:
        options: Base options; keyword options are layered on top.
        transport: Optional transport for the instance and its extensions.
    """
    return Instance(as_options(options, **kwargs), transport=transport)
