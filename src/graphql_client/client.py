"""GraphQL client facade."""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from graphql_client._http import HttpTransport, TraceCallback, Transport
from graphql_client.engine import ExecutionEngine
from graphql_client.types.config import NO_RETRY, AbortSignal, ClientConfig, RetryConfig
from graphql_client.types.request import Request


class Client:
    """A client for one GraphQL endpoint. Safe to share across threads.

    Pass ``http_client`` to reuse an existing :class:`httpx.Client` (its
    connection pool, timeouts and proxies), or ``transport`` to replace the
    HTTP layer entirely.
    """

    def __init__(
        self,
        endpoint: str,
        *,
        http_client: httpx.Client | None = None,
        transport: Transport | None = None,
        retry: RetryConfig | None = None,
        default_headers: Mapping[str, str] | None = None,
        use_multipart: bool = False,
        close_request: bool = False,
        logger: logging.Logger | None = None,
        trace: TraceCallback | None = None,
    ) -> None:
        self._transport = transport or HttpTransport(http_client)
        self._engine = ExecutionEngine(
            self._transport,
            endpoint,
            retry=retry or NO_RETRY,
            default_headers=default_headers,
            use_multipart=use_multipart,
            close_request=close_request,
            logger=logger,
            trace=trace,
        )
        self._endpoint = endpoint

    @classmethod
    def from_config(cls, config: ClientConfig, **kwargs: Any) -> Client:
        """Create a client from a :class:`ClientConfig`."""
        return cls(
            config.endpoint,
            retry=config.retry,
            default_headers=config.default_headers,
            use_multipart=config.use_multipart,
            close_request=config.close_request,
            **kwargs,
        )

    @classmethod
    def from_env(cls, **kwargs: Any) -> Client:
        """Create a client from ``GRAPHQL_*`` environment variables."""
        return cls.from_config(ClientConfig.from_env(), **kwargs)

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def retry(self) -> RetryConfig:
        return self._engine.retry

    def run(
        self,
        request: Request,
        response: Any = None,
        *,
        signal: AbortSignal | None = None,
    ) -> Any:
        """Execute *request*, fill *response* with the ``data`` field and return it.

        Pass ``response=None`` to skip filling a target. Raises
        :class:`~graphql_client.errors.ApplicationError` when the envelope
        carries errors; *response* is still filled with any partial data.
        """
        return self._engine.run(request, response, signal=signal)

    def close(self) -> None:
        """Close the underlying transport."""
        if hasattr(self._transport, "close"):
            self._transport.close()
