"""Tests for fetchwrap.defaults and the content-type table."""

from __future__ import annotations

import httpx
import pytest

from fetchwrap.client.response import FetchResponse
from fetchwrap.content_types import CONTENT_TYPES, ContentKind
from fetchwrap.defaults import (
    DEFAULT_OPTIONS,
    default_on_failure,
    default_on_response,
    default_on_success,
    default_serialize,
)
from fetchwrap.exceptions import ResponseError


class TestDefaultSerialize:
    def test_mapping(self) -> None:
        assert default_serialize({"page": 2, "q": "a b"}) == "page=2&q=a+b"

    def test_repeated_values(self) -> None:
        assert default_serialize({"a": [1, 2]}) == "a=1&a=2"

    def test_pairs(self) -> None:
        assert default_serialize([("a", "1"), ("a", "2")]) == "a=1&a=2"

    def test_string_passes_through(self) -> None:
        assert default_serialize("?x=1&y=2") == "x=1&y=2"

    def test_empty_mapping(self) -> None:
        assert default_serialize({}) == ""


class TestDefaultHooks:
    def test_on_response_passes_2xx(self) -> None:
        response = FetchResponse(httpx.Response(204))
        assert default_on_response(response) is response

    @pytest.mark.parametrize("status", [301, 400, 404, 500])
    def test_on_response_raises_otherwise(self, status: int) -> None:
        response = FetchResponse(httpx.Response(status))
        with pytest.raises(ResponseError) as exc_info:
            default_on_response(response)
        assert exc_info.value.response is response

    def test_on_success_is_identity(self) -> None:
        value = object()
        assert default_on_success(value) is value

    def test_on_failure_reraises_same_error(self) -> None:
        err = RuntimeError("boom")
        with pytest.raises(RuntimeError) as exc_info:
            default_on_failure(err)
        assert exc_info.value is err


class TestDefaultOptions:
    def test_policy_fields(self) -> None:
        assert DEFAULT_OPTIONS.prefix_url == ""
        assert DEFAULT_OPTIONS.credentials == "same-origin"
        assert DEFAULT_OPTIONS.serialize is default_serialize
        assert DEFAULT_OPTIONS.on_response is default_on_response
        assert DEFAULT_OPTIONS.on_success is default_on_success
        assert DEFAULT_OPTIONS.on_failure is default_on_failure

    def test_no_timeout_or_headers(self) -> None:
        assert DEFAULT_OPTIONS.timeout is None
        assert DEFAULT_OPTIONS.headers is None


class TestContentTypes:
    def test_table(self) -> None:
        assert dict(CONTENT_TYPES) == {
            "json": "application/json",
            "text": "text/*",
            "form_data": "multipart/form-data",
            "array_buffer": "*/*",
            "blob": "*/*",
        }

    def test_every_kind_has_an_entry(self) -> None:
        for kind in ContentKind:
            assert kind.value in CONTENT_TYPES

    def test_read_only(self) -> None:
        with pytest.raises(TypeError):
            CONTENT_TYPES["json"] = "x"  # type: ignore[index]
