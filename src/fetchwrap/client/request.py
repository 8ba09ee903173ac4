"""Request executor: turns a target and options into a :class:`PendingResult`.

:func:`request` is the single path every call goes through:

1. Options are merged over :data:`~fetchwrap.defaults.DEFAULT_OPTIONS`.
2. ``query_params`` are serialised and the URL is built as
   ``prefix_url + target + "?" + query``.
3. ``json_body`` is encoded compactly with :func:`json.dumps` and forces the
   ``content-type`` header to ``application/json``.
4. The transport call is raced against an optional timeout and caller
   cancellation. The first settlement wins; later ones are ignored.
5. The transport response runs through ``on_response``, then the settled
   value (or error) runs through ``on_success`` / ``on_failure``.

The returned :class:`PendingResult` is awaitable and carries one lazy decode
accessor per :class:`~fetchwrap.content_types.ContentKind`.

Timeout wiring depends on whether the transport honours abort signals:

* with abort support, the timer settles with
  :class:`~fetchwrap.exceptions.TimeoutError_` *and* aborts an internal
  controller whose signal is handed to the transport. A caller-supplied
  signal is chained into that controller and cancels the timer.
* without abort support, the timer only settles with ``TimeoutError_``; the
  transport call runs on and its result is discarded.
"""

from __future__ import annotations

import asyncio
import inspect
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Generator, Optional

from fetchwrap.content_types import CONTENT_TYPES, ContentKind
from fetchwrap.defaults import DEFAULT_OPTIONS
from fetchwrap.exceptions import TimeoutError_
from fetchwrap.models import Options, OptionsLike
from fetchwrap.options import as_options, merge_options
from fetchwrap.signals import AbortController, AbortSignal

logger = logging.getLogger(__name__)

_transport_factory: Optional[Callable[[], Any]] = None


def get_default_transport() -> Any:
    """Return the transport used when none is configured.

    A new :class:`~fetchwrap.client.transport.HttpxTransport` is created on
    each call unless a factory was installed with
    :func:`set_default_transport_factory`.
    """
    if _transport_factory is not None:
        return _transport_factory()
    from fetchwrap.client.transport import HttpxTransport

    return HttpxTransport()


def set_default_transport_factory(factory: Optional[Callable[[], Any]]) -> None:
    """Install (or with ``None``, remove) the default transport factory."""
    global _transport_factory
    _transport_factory = factory


@dataclass
class RequestDescriptor:
    """Everything the transport receives for one call.

    ``headers`` stays mutable until dispatch; the transport gets a copy.
    """

    url: str
    method: Optional[str] = None
    headers: dict[str, str] = field(default_factory=dict)
    body: Any = None
    signal: Optional[AbortSignal] = None
    credentials: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_init(self) -> dict[str, Any]:
        init: dict[str, Any] = dict(self.extra)
        init["method"] = self.method
        init["headers"] = dict(self.headers)
        init["body"] = self.body
        if self.credentials is not None:
            init["credentials"] = self.credentials
        if self.signal is not None:
            init["signal"] = self.signal
        return init


def build_request(target: str, options: Options) -> RequestDescriptor:
    """Build the descriptor for *target* from fully merged *options*."""
    query = ""
    if options.query_params is not None:
        query = "?" + options.serialize(options.query_params)

    headers = dict(options.headers or {})
    body = options.body
    if options.json_body is not None:
        body = json.dumps(options.json_body, separators=(",", ":"))
        headers["content-type"] = CONTENT_TYPES[ContentKind.JSON.value]

    return RequestDescriptor(
        url=(options.prefix_url or "") + target + query,
        method=options.method.value if options.method is not None else None,
        headers=headers,
        body=body,
        signal=options.signal,
        credentials=options.credentials,
        extra=options.extra,
    )


async def _call_hook(hook: Callable[[Any], Any], value: Any) -> Any:
    result = hook(value)
    if inspect.isawaitable(result):
        result = await result
    return result


class PendingResult:
    """Awaitable handle on one in-flight request.

    Awaiting it yields the final response (after all hooks). The decode
    accessors :meth:`json`, :meth:`text`, :meth:`blob`,
    :meth:`array_buffer` and :meth:`form_data` each await the same
    underlying task, clone the response and decode the clone, so any number
    of accessors can be used on one result. Cancelling an accessor leaves
    the request running; cancelling a direct ``await`` of the result
    cancels the transport call.

    Invoking an accessor sets the ``accept`` header immediately. That only
    reaches the server if the request has not been dispatched yet, i.e.
    when the accessor is called in the same synchronous step that created
    the result. Treat it as advisory.

    When created inside a running event loop the request is scheduled
    right away; otherwise it starts on first await.
    """

    def __init__(
        self,
        descriptor: RequestDescriptor,
        options: Options,
        transport: Any,
        supports_abort: bool,
    ) -> None:
        self._descriptor = descriptor
        self._options = options
        self._transport = transport
        self._supports_abort = supports_abort
        self._task: Optional[asyncio.Future[Any]] = None
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        if loop is not None:
            self._task = loop.create_task(self._run())

    @property
    def descriptor(self) -> RequestDescriptor:
        return self._descriptor

    @property
    def options(self) -> Options:
        """The fully merged options this request runs with."""
        return self._options

    def __await__(self) -> Generator[Any, None, Any]:
        return self._ensure_task().__await__()

    def _ensure_task(self) -> asyncio.Future[Any]:
        if self._task is None:
            self._task = asyncio.ensure_future(self._run())
        return self._task

    # ------------------------------------------------------------------ #
    # Decode accessors
    # ------------------------------------------------------------------ #

    def json(self) -> Awaitable[Any]:
        return self._decode(ContentKind.JSON)

    def text(self) -> Awaitable[str]:
        return self._decode(ContentKind.TEXT)

    def blob(self) -> Awaitable[Any]:
        return self._decode(ContentKind.BLOB)

    def array_buffer(self) -> Awaitable[bytes]:
        return self._decode(ContentKind.ARRAY_BUFFER)

    def form_data(self) -> Awaitable[Any]:
        return self._decode(ContentKind.FORM_DATA)

    def _decode(self, kind: ContentKind) -> Awaitable[Any]:
        self._descriptor.headers["accept"] = CONTENT_TYPES[kind.value]
        return self._read(kind)

    async def _read(self, kind: ContentKind) -> Any:
        # cancelling one accessor must not cancel the request for the others
        response = await asyncio.shield(self._ensure_task())
        return await getattr(response.clone(), kind.value)()

    # ------------------------------------------------------------------ #
    # Execution
    # ------------------------------------------------------------------ #

    async def _run(self) -> Any:
        try:
            response = await self._race()
        except Exception as exc:
            return await _call_hook(self._options.on_failure, exc)
        return await _call_hook(self._options.on_success, response)

    async def _race(self) -> Any:
        loop = asyncio.get_running_loop()
        settled: asyncio.Future[Any] = loop.create_future()
        descriptor = self._descriptor
        caller_signal = descriptor.signal
        timer: Optional[asyncio.TimerHandle] = None
        on_caller_abort: Optional[Callable[[], None]] = None

        def reject(exc: BaseException) -> None:
            if not settled.done():
                settled.set_exception(exc)

        timeout = self._options.timeout or 0
        if timeout > 0:
            if self._supports_abort:
                controller = AbortController()

                def on_timeout() -> None:
                    logger.debug("Request to %s timed out after %ss", descriptor.url, timeout)
                    reject(TimeoutError_())
                    controller.abort()

                timer = loop.call_later(timeout, on_timeout)

                if caller_signal is not None:

                    def on_caller_abort() -> None:
                        logger.debug("Caller aborted request to %s", descriptor.url)
                        timer.cancel()
                        controller.abort(caller_signal.reason)

                    if caller_signal.aborted:
                        on_caller_abort()
                    else:
                        caller_signal.add_listener(on_caller_abort)

                descriptor.signal = controller.signal
            else:
                timer = loop.call_later(timeout, reject, TimeoutError_())

        fetch_task = loop.create_task(self._fetch())

        def on_fetch_done(task: asyncio.Task[Any]) -> None:
            if timer is not None:
                timer.cancel()
            if task.cancelled():
                if not settled.done():
                    settled.cancel()
                return
            exc = task.exception()
            if settled.done():
                logger.debug("Ignoring late settlement for %s: %r", descriptor.url, exc)
            elif exc is not None:
                settled.set_exception(exc)
            else:
                settled.set_result(task.result())

        fetch_task.add_done_callback(on_fetch_done)

        try:
            return await settled
        except asyncio.CancelledError:
            fetch_task.cancel()
            raise
        finally:
            if timer is not None:
                timer.cancel()
            if on_caller_abort is not None and caller_signal is not None:
                caller_signal.remove_listener(on_caller_abort)

    async def _fetch(self) -> Any:
        descriptor = self._descriptor
        logger.debug("Dispatching %s %s", descriptor.method or "GET", descriptor.url)
        response = await self._transport(descriptor.url, descriptor.to_init())
        return await _call_hook(self._options.on_response, response)


def request(
    target: str,
    options: OptionsLike = None,
    *,
    transport: Any = None,
    supports_abort: Optional[bool] = None,
    **kwargs: Any,
) -> PendingResult:
    """Start a request for *target* and return its :class:`PendingResult`.

    Args:
        target: Path or URL appended to ``prefix_url``.
        options: Per-call options; keyword options are layered on top.
        transport: Async callable ``(url, init) -> response``. Defaults to
            :func:`get_default_transport`.
        supports_abort: Whether *transport* honours ``init["signal"]``.
            Defaults to the transport's ``supports_abort`` attribute.

    Returns:
        The awaitable pending result.
    """
    opts = merge_options(DEFAULT_OPTIONS, as_options(options, **kwargs))
    if transport is None:
        transport = get_default_transport()
    if supports_abort is None:
        supports_abort = bool(getattr(transport, "supports_abort", False))
    descriptor = build_request(target, opts)
    return PendingResult(descriptor, opts, transport, supports_abort)
