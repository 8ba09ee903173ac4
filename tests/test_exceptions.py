"""Tests for fetchwrap.exceptions -- messages, tags, and exit codes."""

from __future__ import annotations

import httpx
import pytest

from fetchwrap.client.response import FetchResponse
from fetchwrap.exceptions import (
    AbortError,
    BodyUsedError,
    ConfigError,
    FetchwrapError,
    InvalidUsageError,
    ResponseError,
    TimeoutError_,
    is_aborted,
    is_timeout,
)
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


def _response(status: int) -> FetchResponse:
    return FetchResponse(httpx.Response(status))


class TestResponseError:
    def test_message_is_status_text(self) -> None:
        exc = ResponseError(_response(404))
        assert str(exc) == "Not Found"
        assert exc.status == 404
        assert exc.response.status == 404

    def test_message_falls_back_when_status_text_empty(self) -> None:
        assert str(ResponseError(_response(599))) == "HTTP 599"

    @pytest.mark.parametrize(
        ("status", "code"),
        [
            (401, EXIT_AUTH_FAILURE),
            (403, EXIT_AUTH_FAILURE),
            (404, EXIT_NOT_FOUND),
            (500, EXIT_SERVER_ERROR),
            (503, EXIT_SERVER_ERROR),
            (400, EXIT_HTTP_ERROR),
            (409, EXIT_HTTP_ERROR),
        ],
    )
    def test_exit_code_by_status(self, status: int, code: int) -> None:
        assert ResponseError(_response(status)).exit_code == code

    def test_is_neither_timeout_nor_abort(self) -> None:
        exc = ResponseError(_response(500))
        assert not is_timeout(exc)
        assert not is_aborted(exc)


class TestTimeoutAndAbort:
    def test_timeout(self) -> None:
        exc = TimeoutError_()
        assert str(exc) == "Request timed out"
        assert exc.name == "TimeoutError"
        assert exc.exit_code == EXIT_TIMEOUT
        assert is_timeout(exc)
        assert not is_aborted(exc)

    def test_abort_without_reason(self) -> None:
        exc = AbortError()
        assert str(exc) == "The operation was aborted"
        assert exc.reason is None
        assert exc.exit_code == EXIT_CONNECTION_ERROR
        assert is_aborted(exc)
        assert not is_timeout(exc)

    def test_abort_with_reason(self) -> None:
        exc = AbortError("user left")
        assert str(exc) == "The operation was aborted: user left"
        assert exc.reason == "user left"


class TestPredicates:
    def test_plain_exceptions(self) -> None:
        assert not is_aborted(RuntimeError("x"))
        assert not is_timeout(ValueError("x"))
        assert not is_timeout(TimeoutError())

    def test_tag_is_what_counts(self) -> None:
        class ForeignAbort(Exception):
            name = "AbortError"

        assert is_aborted(ForeignAbort())


class TestExitCodes:
    def test_base_defaults(self) -> None:
        assert FetchwrapError("x").exit_code == EXIT_GENERIC_FAILURE

    def test_override(self) -> None:
        assert FetchwrapError("x", exit_code=9).exit_code == 9

    def test_subclasses(self) -> None:
        assert InvalidUsageError("x").exit_code == EXIT_INVALID_USAGE
        assert ConfigError("x").exit_code == EXIT_GENERIC_FAILURE
        assert BodyUsedError("x").exit_code == EXIT_GENERIC_FAILURE

    def test_all_inherit_from_base(self) -> None:
        for cls in (ResponseError, TimeoutError_, AbortError, BodyUsedError, InvalidUsageError, ConfigError):
            assert issubclass(cls, FetchwrapError)
