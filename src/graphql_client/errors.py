"""Error hierarchy for the GraphQL client."""
from __future__ import annotations

from typing import Any


class GraphQLClientError(Exception):
    """Base error for all graphql_client errors."""

    retryable: bool = False

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class ConfigurationError(GraphQLClientError):
    """Invalid client or request configuration. Raised before any attempt."""


# ---------------------------------------------------------------------------
# Transport errors
# ---------------------------------------------------------------------------


class TransportError(GraphQLClientError):
    """The HTTP round trip itself failed."""

    def __init__(
        self,
        message: str,
        *,
        retryable: bool = False,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.retryable = retryable


class RequestTimeoutError(TransportError):
    """A request timed out. Timeouts are assumed transient."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        kwargs.setdefault("retryable", True)
        super().__init__(message, **kwargs)


class NetworkError(TransportError):
    """Connection refused, DNS or TLS failure and the like."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)


# ---------------------------------------------------------------------------
# Response errors
# ---------------------------------------------------------------------------


class StatusError(GraphQLClientError):
    """The server answered with a status code that is not a success."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        retryable: bool = False,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.status_code = status_code
        self.retryable = retryable


class DecodeError(GraphQLClientError):
    """The response body is not a valid envelope. Never retried."""

    def __init__(
        self,
        message: str,
        *,
        raw_body: bytes = b"",
        origin: Exception | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.raw_body = raw_body
        self.origin = origin


class ApplicationError(GraphQLClientError):
    """One or more errors reported inside the response envelope.

    ``data`` holds whatever the envelope delivered alongside the errors, so
    partial results survive even when the call fails.
    """

    def __init__(
        self,
        message: str,
        *,
        errors: tuple[Any, ...] = (),
        data: Any = None,
        status_code: int | None = None,
        retryable: bool = False,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.errors = errors
        self.data = data
        self.status_code = status_code
        self.retryable = retryable

    @property
    def names(self) -> list[str]:
        """Names of the aggregated envelope errors, in order."""
        return [e.name for e in self.errors]


# ---------------------------------------------------------------------------
# Engine errors
# ---------------------------------------------------------------------------


class ExhaustedRetriesError(GraphQLClientError):
    """Every allowed attempt produced a retryable failure."""

    def __init__(self, max_tries: int, last_error: Exception | None) -> None:
        super().__init__(
            f"graphql: client has retried {max_tries} times but unable to get "
            f"a successful response: {last_error}",
            cause=last_error,
        )
        self.max_tries = max_tries
        self.last_error = last_error


class CancelledError(GraphQLClientError):
    """The call was aborted by its signal, explicitly or by deadline."""

    def __init__(self, reason: str | None = None) -> None:
        super().__init__(f"graphql: request cancelled: {reason or 'aborted'}")
        self.reason = reason


# ---------------------------------------------------------------------------
# Helper
# ---------------------------------------------------------------------------


def error_from_status_code(
    status_code: int,
    *,
    retryable: bool,
    body: bytes = b"",
) -> StatusError:
    """Build the error for a non-successful status code."""
    message = f"graphql: server returned status {status_code}"
    if body:
        message += f": {body[:200].decode('utf-8', errors='replace')}"
    return StatusError(message, status_code=status_code, retryable=retryable)
