"""Response, attempt and outcome types."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from graphql_client.errors import GraphQLClientError
from graphql_client.types.enums import FailureReason, OutcomeKind, RetryAction

if TYPE_CHECKING:
    import httpx


@dataclass(frozen=True)
class GraphQLErrorEntry:
    """One entry of the envelope's ``errors`` list."""

    name: str = ""
    message: str = ""
    data: Any = None


@dataclass(frozen=True)
class Envelope:
    """Decoded response body. ``data`` may be set even when ``errors`` is not empty."""

    data: Any = None
    errors: tuple[GraphQLErrorEntry, ...] = ()

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


@dataclass(frozen=True)
class RawResponse:
    """What one transport round trip produced.

    Either ``error`` is set (the transport failed) or ``status_code`` and
    ``content`` are.
    """

    request: httpx.Request | None = None
    response: httpx.Response | None = None
    status_code: int | None = None
    content: bytes = b""
    error: GraphQLClientError | None = None
    elapsed: float = 0.0


@dataclass(frozen=True)
class Attempt:
    """One physical attempt within a logical call."""

    ordinal: int
    raw: RawResponse


@dataclass(frozen=True)
class Outcome:
    """Classification of a completed attempt."""

    kind: OutcomeKind
    data: Any = None
    error: GraphQLClientError | None = None
    reason: FailureReason | None = None

    @property
    def retryable(self) -> bool:
        return self.kind is OutcomeKind.RETRYABLE

    @classmethod
    def success(cls, data: Any = None) -> Outcome:
        return cls(kind=OutcomeKind.SUCCESS, data=data)

    @classmethod
    def retryable_failure(
        cls, reason: FailureReason, error: GraphQLClientError, data: Any = None
    ) -> Outcome:
        return cls(kind=OutcomeKind.RETRYABLE, data=data, error=error, reason=reason)

    @classmethod
    def terminal_failure(
        cls, reason: FailureReason, error: GraphQLClientError, data: Any = None
    ) -> Outcome:
        return cls(kind=OutcomeKind.TERMINAL, data=data, error=error, reason=reason)


@dataclass(frozen=True)
class Decision:
    """Retry policy verdict for one attempt."""

    action: RetryAction
    wait: float = 0.0
