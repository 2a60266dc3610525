"""Tests for the httpx transport wrapper."""
from __future__ import annotations

import httpx
import pytest

from graphql_client._http import HttpTransport, Transport
from graphql_client.errors import NetworkError, RequestTimeoutError

URL = "https://api.test.com/graphql"
HEADERS = httpx.Headers([("Content-Type", "application/json; charset=utf-8")])


def _transport(handler) -> tuple[HttpTransport, httpx.Client]:
    http = httpx.Client(transport=httpx.MockTransport(handler))
    return HttpTransport(http), http


class TestHttpTransport:
    def test_satisfies_protocol(self) -> None:
        transport, _ = _transport(lambda r: httpx.Response(200))
        assert isinstance(transport, Transport)

    def test_posts_body_and_headers(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, content=b'{"data": {}}')

        transport, _ = _transport(handler)
        raw = transport.send(URL, content=b'{"query":"q"}', headers=HEADERS)

        assert seen[0].method == "POST"
        assert str(seen[0].url) == URL
        assert seen[0].content == b'{"query":"q"}'
        assert seen[0].headers["content-type"] == "application/json; charset=utf-8"
        assert raw.status_code == 200
        assert raw.content == b'{"data": {}}'
        assert raw.error is None
        assert raw.request is seen[0]
        assert raw.elapsed >= 0.0

    def test_non_2xx_is_not_an_error(self) -> None:
        transport, _ = _transport(lambda r: httpx.Response(503, content=b"busy"))
        raw = transport.send(URL, content=b"", headers=HEADERS)
        assert raw.status_code == 503
        assert raw.content == b"busy"
        assert raw.error is None

    def test_timeout_mapped(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("read timed out", request=request)

        transport, _ = _transport(handler)
        raw = transport.send(URL, content=b"", headers=HEADERS)
        assert isinstance(raw.error, RequestTimeoutError)
        assert raw.error.retryable
        assert isinstance(raw.error.cause, httpx.ReadTimeout)
        assert raw.status_code is None

    def test_connect_error_mapped(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        transport, _ = _transport(handler)
        raw = transport.send(URL, content=b"", headers=HEADERS)
        assert isinstance(raw.error, NetworkError)
        assert not raw.error.retryable
        assert "connection refused" in str(raw.error)

    def test_timeout_passed_as_extension(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200)

        transport, _ = _transport(handler)
        transport.send(URL, content=b"", headers=HEADERS, timeout=2.5)
        assert seen[0].extensions["timeout"]["read"] == pytest.approx(2.5)

    def test_trace_passed_as_extension(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200)

        def trace(name: str, info: dict) -> None:
            pass

        transport, _ = _transport(handler)
        transport.send(URL, content=b"", headers=HEADERS, trace=trace)
        assert seen[0].extensions["trace"] is trace


class TestClose:
    def test_borrowed_client_left_open(self) -> None:
        transport, http = _transport(lambda r: httpx.Response(200))
        transport.close()
        assert not http.is_closed

    def test_owned_client_closed(self) -> None:
        transport = HttpTransport()
        transport.close()
        assert transport._client.is_closed
