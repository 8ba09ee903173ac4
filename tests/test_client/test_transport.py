"""Tests for HttpxTransport."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from fetchwrap.client.response import FetchResponse
from fetchwrap.client.transport import HttpxTransport, Transport, _encode_body
from fetchwrap.exceptions import AbortError
from fetchwrap.signals import AbortController


@pytest.mark.asyncio
class TestHttpxTransport:
    async def test_sends_method_headers_and_body(self, echo_transport, recorded) -> None:
        response = await echo_transport(
            "https://api.test/items",
            {"method": "PUT", "headers": {"x-id": "7"}, "body": "payload"},
        )

        assert isinstance(response, FetchResponse)
        assert response.status == 200
        request = recorded[0]
        assert request.method == "PUT"
        assert str(request.url) == "https://api.test/items"
        assert request.headers["x-id"] == "7"
        assert request.content == b"payload"

    async def test_missing_method_defaults_to_get(self, echo_transport, recorded) -> None:
        await echo_transport("https://api.test/", {"method": None, "headers": {}, "body": None})
        assert recorded[0].method == "GET"

    async def test_uses_injected_client(self, recorded) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            recorded.append(request)
            return httpx.Response(201)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            transport = HttpxTransport(client=client)
            response = await transport("https://api.test/", {"method": "POST"})
            assert not client.is_closed

        assert response.status == 201
        assert recorded[0].method == "POST"

    async def test_pre_aborted_signal(self, echo_transport, recorded) -> None:
        controller = AbortController()
        controller.abort("stop")

        with pytest.raises(AbortError) as exc_info:
            await echo_transport("https://api.test/", {"signal": controller.signal})

        assert exc_info.value.reason == "stop"
        assert recorded == []

    async def test_abort_in_flight(self, mock_transport) -> None:
        started = asyncio.Event()

        async def handler(request: httpx.Request) -> httpx.Response:
            started.set()
            await asyncio.sleep(10)
            return httpx.Response(200)

        controller = AbortController()
        call = asyncio.ensure_future(
            mock_transport(handler)("https://api.test/", {"signal": controller.signal})
        )
        await started.wait()
        controller.abort()

        with pytest.raises(AbortError):
            await call
        assert controller.signal._listeners == []

    async def test_network_errors_pass_through(self, mock_transport) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(httpx.ConnectError):
            await mock_transport(handler)("https://api.test/", {})


class TestProtocol:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(HttpxTransport(), Transport)
        assert HttpxTransport.supports_abort is True


class TestEncodeBody:
    def test_none(self) -> None:
        assert _encode_body(None) is None

    def test_bytes_like(self) -> None:
        assert _encode_body(b"a") == b"a"
        assert _encode_body(bytearray(b"b")) == b"b"

    def test_str(self) -> None:
        assert _encode_body("é") == "é".encode("utf-8")

    def test_unsupported(self) -> None:
        with pytest.raises(TypeError, match="dict"):
            _encode_body({"a": 1})
