"""HTTP transport wrapper around httpx."""
from __future__ import annotations

import time
from typing import Any, Callable, Protocol, runtime_checkable

import httpx

from graphql_client.errors import NetworkError, RequestTimeoutError
from graphql_client.types.response import RawResponse

TraceCallback = Callable[[str, dict[str, Any]], None]


@runtime_checkable
class Transport(Protocol):
    """Protocol the execution engine sends attempts through."""

    def send(
        self,
        url: str,
        *,
        content: bytes,
        headers: httpx.Headers,
        timeout: float | None = None,
        trace: TraceCallback | None = None,
    ) -> RawResponse:
        """POST *content* to *url* and report what came back."""
        ...


class HttpTransport:
    """Thin wrapper around :mod:`httpx` that maps failures into graphql_client errors.

    Transport failures are returned inside the :class:`RawResponse` rather
    than raised, so the classifier sees every attempt the same way.
    """

    def __init__(self, client: httpx.Client | None = None) -> None:
        self._owns_client = client is None
        self._client = client or httpx.Client()

    def send(
        self,
        url: str,
        *,
        content: bytes,
        headers: httpx.Headers,
        timeout: float | None = None,
        trace: TraceCallback | None = None,
    ) -> RawResponse:
        kwargs: dict[str, Any] = {"content": content, "headers": headers}
        if timeout is not None:
            kwargs["timeout"] = timeout
        if trace is not None:
            kwargs["extensions"] = {"trace": trace}
        request = self._client.build_request("POST", url, **kwargs)

        start = time.monotonic()
        try:
            resp = self._client.send(request)
        except httpx.TimeoutException as exc:
            return RawResponse(
                request=request,
                error=RequestTimeoutError(str(exc) or "request timed out", cause=exc),
                elapsed=time.monotonic() - start,
            )
        except httpx.RequestError as exc:
            return RawResponse(
                request=request,
                error=NetworkError(str(exc) or type(exc).__name__, cause=exc),
                elapsed=time.monotonic() - start,
            )

        return RawResponse(
            request=request,
            response=resp,
            status_code=resp.status_code,
            content=resp.content,
            elapsed=time.monotonic() - start,
        )

    def close(self) -> None:
        """Close the underlying httpx client if this transport created it."""
        if self._owns_client:
            self._client.close()
