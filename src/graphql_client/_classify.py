"""Outcome classification for a completed attempt."""
from __future__ import annotations

from typing import Any

from graphql_client._decoding import aggregate_errors, decode_envelope
from graphql_client.errors import DecodeError, GraphQLClientError, error_from_status_code
from graphql_client.types.config import RetryConfig
from graphql_client.types.enums import FailureReason
from graphql_client.types.response import Outcome, RawResponse


def classify(raw: RawResponse, config: RetryConfig, target: Any = None) -> Outcome:
    """Turn one round trip into an :class:`Outcome`.

    Transport timeouts and retryable statuses mark the attempt retryable.
    Any body is decoded regardless, since application errors can accompany
    any status; a decode failure is terminal and overrides everything else.
    Transient application error names add retryability, they never remove it.
    """
    error: GraphQLClientError | None = None
    reason: FailureReason | None = None
    retryable = False

    if raw.error is not None:
        error = raw.error
        reason = FailureReason.TRANSPORT
        retryable = raw.error.retryable

    status = raw.status_code
    if status is not None and not retryable:
        if config.should_retry_status(status):
            retryable = True
            error = error_from_status_code(status, retryable=True, body=raw.content)
            reason = FailureReason.STATUS
        elif status >= 400:
            error = error_from_status_code(status, retryable=False, body=raw.content)
            reason = FailureReason.STATUS

    data: Any = None
    if raw.content:
        try:
            envelope = decode_envelope(raw.content, target)
        except DecodeError as exc:
            return Outcome.terminal_failure(FailureReason.DECODE, _diagnose(exc, raw, error))
        data = envelope.data
        if envelope.has_errors:
            transient = any(config.is_transient_error_name(e.name) for e in envelope.errors)
            retryable = retryable or transient
            error = aggregate_errors(
                envelope.errors, data=data, status_code=status, retryable=retryable
            )
            reason = FailureReason.APPLICATION

    if error is None:
        return Outcome.success(data)
    if retryable:
        return Outcome.retryable_failure(reason, error, data)
    return Outcome.terminal_failure(reason, error, data)


def _diagnose(
    exc: DecodeError, raw: RawResponse, origin: GraphQLClientError | None
) -> DecodeError:
    """Build the terminal decode error, embedding any upstream failure and the raw body."""
    body = raw.content.decode("utf-8", errors="replace")
    if origin is not None:
        message = f"graphql: origin error: ({origin}), decode error: ({exc}), response: ({body})"
    else:
        message = f"graphql: decode error: ({exc}), response: ({body})"
    return DecodeError(message, raw_body=raw.content, origin=origin, cause=exc)
