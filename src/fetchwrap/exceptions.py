"""Exception hierarchy for fetchwrap.

All exceptions inherit from :class:`FetchwrapError`, which carries two
class-level attributes:

* ``name`` -- a stable discriminator tag used to classify failures without
  relying on ``isinstance`` checks (see :func:`is_aborted` and
  :func:`is_timeout`).
* ``exit_code`` -- the process exit code the CLI uses when the error
  escapes a command, taken from :mod:`fetchwrap.exit_codes`.

Subclass hierarchy::

    FetchwrapError      (exit 1)
    +-- ResponseError     (exit 3/4/5/8, by status)
    +-- TimeoutError_     (exit 7)
    +-- AbortError        (exit 6)
    +-- BodyUsedError     (exit 1)
    +-- InvalidUsageError (exit 2)
    +-- ConfigError       (exit 1)

Network failures raised by the transport (``httpx.HTTPError`` subclasses)
are never wrapped; they reach the caller unchanged.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from fetchwrap.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_HTTP_ERROR,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
    EXIT_TIMEOUT,
)

if TYPE_CHECKING:
    from fetchwrap.client.response import FetchResponse


class FetchwrapError(Exception):
    """Base exception for all fetchwrap errors.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    name: str = "FetchwrapError"
    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ResponseError(FetchwrapError):
    """Raised by the default ``on_response`` hook for non-2xx responses.

    The message is the response's status text. The originating response is
    kept on :attr:`response` so callers can inspect the status code,
    headers, and body.

    Args:
        response: The response that failed the success check.
    """

    name = "ResponseError"

    def __init__(self, response: FetchResponse):
        super().__init__(response.status_text or f"HTTP {response.status}")
        self.response = response
        self.exit_code = _exit_code_for_status(response.status)

    @property
    def status(self) -> int:
        """Shortcut for ``self.response.status``."""
        return self.response.status


class TimeoutError_(FetchwrapError):
    """Raised when a request does not settle before its ``timeout``.

    Named with a trailing underscore to avoid shadowing the built-in
    ``TimeoutError``.
    """

    name = "TimeoutError"
    exit_code = EXIT_TIMEOUT

    def __init__(self) -> None:
        super().__init__("Request timed out")


class AbortError(FetchwrapError):
    """Raised by a transport that observed its abort signal firing.

    The request executor never constructs this error itself; it only
    recognises it through :func:`is_aborted`.

    Args:
        reason: Optional value passed to
            :meth:`~fetchwrap.signals.AbortController.abort`.
    """

    name = "AbortError"
    exit_code = EXIT_CONNECTION_ERROR

    def __init__(self, reason: Any = None):
        message = "The operation was aborted"
        if reason is not None:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.reason = reason


class BodyUsedError(FetchwrapError):
    """Raised when a response body is read twice or cloned after being read."""

    name = "BodyUsedError"


class InvalidUsageError(FetchwrapError):
    """Raised for malformed CLI arguments (bad header or parameter syntax)."""

    name = "InvalidUsageError"
    exit_code = EXIT_INVALID_USAGE


class ConfigError(FetchwrapError):
    """Raised for configuration problems (invalid JSON, failed validation)."""

    name = "ConfigError"


def _exit_code_for_status(status: int) -> int:
    if status in (401, 403):
        return EXIT_AUTH_FAILURE
    if status == 404:
        return EXIT_NOT_FOUND
    if status >= 500:
        return EXIT_SERVER_ERROR
    return EXIT_HTTP_ERROR


def is_aborted(error: BaseException) -> bool:
    """Return ``True`` if *error* is tagged as an abort failure."""
    return getattr(error, "name", None) == AbortError.name


def is_timeout(error: BaseException) -> bool:
    """Return ``True`` if *error* is tagged as a timeout failure."""
    return getattr(error, "name", None) == TimeoutError_.name
