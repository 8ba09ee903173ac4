"""Cancellation tokens modelled on the DOM ``AbortController``/``AbortSignal`` pair.

An :class:`AbortController` owns a single :class:`AbortSignal`. Calling
:meth:`AbortController.abort` marks the signal aborted and runs every
registered listener exactly once, in registration order. Later calls are
no-ops.

Transports observe a signal by registering a listener that cancels their
in-flight work (see :class:`~fetchwrap.client.transport.HttpxTransport`).
Listeners run synchronously on the thread that calls ``abort``; with
asyncio that is the event loop thread.

Example::

    controller = AbortController()
    pending = fetch.get("/slow", signal=controller.signal)
    controller.abort("user navigated away")
"""

from __future__ import annotations

import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)

Listener = Callable[[], Any]


class AbortSignal:
    """Read side of a cancellation token.

    Created by :class:`AbortController`; callers only listen on it.
    """

    def __init__(self) -> None:
        self._aborted = False
        self._reason: Any = None
        self._listeners: list[Listener] = []

    @property
    def aborted(self) -> bool:
        """Whether the owning controller has aborted."""
        return self._aborted

    @property
    def reason(self) -> Any:
        """The value passed to :meth:`AbortController.abort`, if any."""
        return self._reason

    def add_listener(self, listener: Listener) -> None:
        """Register *listener* to run when the signal aborts.

        Registering on an already-aborted signal does not invoke the
        listener; check :attr:`aborted` first.
        """
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        """Unregister *listener*. Unknown listeners are ignored."""
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def _abort(self, reason: Any) -> None:
        if self._aborted:
            return
        self._aborted = True
        self._reason = reason
        listeners, self._listeners = self._listeners, []
        logger.debug("Signal aborted (reason=%r), notifying %d listener(s)", reason, len(listeners))
        for listener in listeners:
            listener()

    def __repr__(self) -> str:
        return f"AbortSignal(aborted={self._aborted})"


class AbortController:
    """Write side of a cancellation token."""

    def __init__(self) -> None:
        self._signal = AbortSignal()

    @property
    def signal(self) -> AbortSignal:
        """The signal controlled by this controller."""
        return self._signal

    def abort(self, reason: Any = None) -> None:
        """Abort the signal and notify its listeners (once)."""
        self._signal._abort(reason)
