"""Tests for the Client facade."""
from __future__ import annotations

import json
from dataclasses import replace
from types import SimpleNamespace
from typing import Any
from unittest.mock import MagicMock

import httpx
import pytest

from graphql_client import Client, ClientConfig, Request
from graphql_client.errors import ApplicationError, ConfigurationError
from graphql_client.types.config import EXPONENTIAL_RETRY, LINEAR_RETRY, NO_RETRY
from graphql_client.types.response import RawResponse

ENDPOINT = "https://api.test.com/graphql"


def _http(body: Any, status: int = 200, seen: list[httpx.Request] | None = None) -> httpx.Client:
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status, content=json.dumps(body).encode())

    return httpx.Client(transport=httpx.MockTransport(handler))


class TestClient:
    def test_defaults(self) -> None:
        client = Client(ENDPOINT, http_client=_http({}))
        assert client.endpoint == ENDPOINT
        assert client.retry == NO_RETRY

    def test_run_fills_mapping(self) -> None:
        client = Client(ENDPOINT, http_client=_http({"data": {"something": "yes"}}))
        target: dict[str, Any] = {}
        data = client.run(Request(query="query {}"), target)
        assert data == {"something": "yes"}
        assert target == {"something": "yes"}

    def test_run_fills_object(self) -> None:
        client = Client(ENDPOINT, http_client=_http({"data": {"something": "yes"}}))
        target = SimpleNamespace()
        client.run(Request(query="query {}"), target)
        assert target.something == "yes"

    def test_partial_data_with_error(self) -> None:
        body = {"data": {"something": "no"}, "errors": [{"name": "not_found", "message": "x"}]}
        client = Client(ENDPOINT, http_client=_http(body))
        target: dict[str, Any] = {}
        with pytest.raises(ApplicationError) as exc_info:
            client.run(Request(query="q"), target)
        assert target == {"something": "no"}
        assert exc_info.value.data == {"something": "no"}

    def test_unsupported_target_rejected(self) -> None:
        client = Client(ENDPOINT, http_client=_http({"data": {"something": "yes"}}))
        with pytest.raises(ConfigurationError, match="tuple"):
            client.run(Request(query="q"), ())

    def test_default_headers_sent(self) -> None:
        seen: list[httpx.Request] = []
        client = Client(
            ENDPOINT,
            http_client=_http({"data": {}}, seen=seen),
            default_headers={"Authorization": "Bearer t"},
        )
        client.run(Request(query="q"))
        assert seen[0].headers["authorization"] == "Bearer t"

    def test_invalid_retry_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            Client(ENDPOINT, http_client=_http({}), retry=replace(LINEAR_RETRY, max_tries=0))

    def test_custom_transport(self) -> None:
        transport = MagicMock()
        transport.send.return_value = RawResponse(status_code=200, content=b'{"data": {"a": 1}}')
        client = Client(ENDPOINT, transport=transport)
        assert client.run(Request(query="q")) == {"a": 1}
        assert transport.send.call_args.args[0] == ENDPOINT
        client.close()
        transport.close.assert_called_once()

    def test_close_leaves_borrowed_client_open(self) -> None:
        http = _http({})
        Client(ENDPOINT, http_client=http).close()
        assert not http.is_closed


class TestFromConfig:
    def test_from_config(self) -> None:
        config = ClientConfig(
            endpoint=ENDPOINT,
            retry=EXPONENTIAL_RETRY,
            default_headers={"X-Team": "core"},
            use_multipart=True,
        )
        seen: list[httpx.Request] = []
        client = Client.from_config(config, http_client=_http({"data": {}}, seen=seen))
        assert client.retry == EXPONENTIAL_RETRY
        client.run(Request(query="q"))
        assert seen[0].headers["x-team"] == "core"
        assert seen[0].headers["content-type"].startswith("multipart/form-data")

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GRAPHQL_ENDPOINT", ENDPOINT)
        monkeypatch.setenv("GRAPHQL_RETRY_POLICY", "linear")
        monkeypatch.setenv("GRAPHQL_MAX_TRIES", "2")
        client = Client.from_env(http_client=_http({"data": {}}))
        assert client.endpoint == ENDPOINT
        assert client.retry.max_tries == 2
        assert client.retry.interval == LINEAR_RETRY.interval

    def test_from_env_requires_endpoint(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("GRAPHQL_ENDPOINT", raising=False)
        with pytest.raises(ConfigurationError, match="GRAPHQL_ENDPOINT"):
            Client.from_env()
