"""Execution engine: drives one logical call through one or more attempts."""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from graphql_client._classify import classify
from graphql_client._encoding import JSON_CONTENT_TYPE, EncodedBody, encode_request
from graphql_client._http import TraceCallback, Transport
from graphql_client._retry import RetrySchedule, decide
from graphql_client.errors import CancelledError, ExhaustedRetriesError, GraphQLClientError
from graphql_client.hooks import DEFAULT_LOGGER_NAME
from graphql_client.types.config import NO_RETRY, AbortSignal, RetryConfig
from graphql_client.types.enums import EngineEvent, EngineState, RetryAction
from graphql_client.types.request import Request
from graphql_client.types.response import Attempt, Decision, Outcome

# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------

_TRANSITIONS: dict[tuple[EngineState, EngineEvent], EngineState] = {
    (EngineState.ATTEMPTING, EngineEvent.SENT): EngineState.EVALUATING,
    (EngineState.ATTEMPTING, EngineEvent.CANCEL): EngineState.CANCELLED,
    (EngineState.EVALUATING, EngineEvent.STOP): EngineState.SUCCEEDED,
    (EngineState.EVALUATING, EngineEvent.RETRY): EngineState.WAITING,
    (EngineState.EVALUATING, EngineEvent.EXHAUST): EngineState.EXHAUSTED,
    (EngineState.WAITING, EngineEvent.TIMER_FIRED): EngineState.ATTEMPTING,
    (EngineState.WAITING, EngineEvent.CANCEL): EngineState.CANCELLED,
}

_DECISION_EVENTS: dict[RetryAction, EngineEvent] = {
    RetryAction.STOP: EngineEvent.STOP,
    RetryAction.RETRY: EngineEvent.RETRY,
    RetryAction.EXHAUSTED: EngineEvent.EXHAUST,
}


def transition(state: EngineState, event: EngineEvent) -> EngineState:
    """Return the state that follows *state* on *event*.

    Terminal states absorb every event. Raises :class:`ValueError` for an
    event the current state cannot receive.
    """
    if state.terminal:
        return state
    try:
        return _TRANSITIONS[(state, event)]
    except KeyError:
        raise ValueError(f"Invalid event {event.value!r} in state {state.value!r}") from None


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


class ExecutionEngine:
    """Turns one logical call into physical attempts and a single result.

    The engine holds only immutable settings; all per-call state (body
    buffer, attempt ordinal, backoff interval) lives inside :meth:`run`, so
    one engine can serve concurrent calls from several threads.
    """

    def __init__(
        self,
        transport: Transport,
        endpoint: str,
        *,
        retry: RetryConfig = NO_RETRY,
        default_headers: Mapping[str, str] | None = None,
        use_multipart: bool = False,
        close_request: bool = False,
        logger: logging.Logger | None = None,
        trace: TraceCallback | None = None,
    ) -> None:
        retry.validate()
        self._transport = transport
        self._endpoint = endpoint
        self._retry = retry
        self._default_headers = dict(default_headers) if default_headers else {}
        self._use_multipart = use_multipart
        self._close_request = close_request
        self._log = logger or logging.getLogger(DEFAULT_LOGGER_NAME)
        self._trace = trace

    @property
    def retry(self) -> RetryConfig:
        return self._retry

    def run(
        self,
        request: Request,
        target: Any = None,
        *,
        signal: AbortSignal | None = None,
    ) -> Any:
        """Execute *request* and return the decoded ``data``.

        Decoded data is also applied to *target* in place, including when
        the call fails with application errors. Raises a
        :class:`~graphql_client.errors.GraphQLClientError` subclass on failure.
        """
        signal = signal or AbortSignal()
        signal.raise_if_aborted()

        body = encode_request(request, multipart=self._use_multipart, url=self._endpoint)
        headers = self._build_headers(body, request)
        self._log_request(request, headers)

        schedule = RetrySchedule.start(self._retry)
        state = EngineState.ATTEMPTING
        ordinal = 1
        attempt: Attempt | None = None
        outcome: Outcome | None = None
        decision: Decision | None = None

        while not state.terminal:
            if state is EngineState.ATTEMPTING:
                if signal.aborted:
                    state = transition(state, EngineEvent.CANCEL)
                    continue
                attempt = self._attempt(ordinal, body, headers, signal)
                state = transition(state, EngineEvent.SENT)

            elif state is EngineState.EVALUATING:
                outcome = classify(attempt.raw, self._retry, target)
                decision = decide(schedule, ordinal, outcome)
                self._log.debug(
                    "<< [%d] outcome=%s reason=%s action=%s",
                    ordinal,
                    outcome.kind.value,
                    outcome.reason.value if outcome.reason else None,
                    decision.action.value,
                )
                state = transition(state, _DECISION_EVENTS[decision.action])

            elif state is EngineState.WAITING:
                if signal.aborted:
                    state = transition(state, EngineEvent.CANCEL)
                    continue
                self._notify_before_retry(attempt, outcome, ordinal)
                self._log.warning(
                    "Retrying in %.2fs (attempt %d of %d): %s",
                    decision.wait,
                    ordinal,
                    schedule.max_tries,
                    outcome.error,
                )
                if signal.wait(decision.wait):
                    state = transition(state, EngineEvent.CANCEL)
                    continue
                schedule.advance()
                self._log.debug("[%d] New interval: %.2fs", ordinal, schedule.interval)
                ordinal += 1
                state = transition(state, EngineEvent.TIMER_FIRED)

        return self._finish(state, outcome, schedule, signal)

    # -- internals -----------------------------------------------------------

    def _attempt(
        self,
        ordinal: int,
        body: EncodedBody,
        headers: httpx.Headers,
        signal: AbortSignal,
    ) -> Attempt:
        content = body.replay()
        self._log.debug("<< [%d] sending %d bytes", ordinal, len(content))
        raw = self._transport.send(
            self._endpoint,
            content=content,
            headers=headers,
            timeout=signal.remaining(),
            trace=self._trace,
        )
        if raw.error is not None:
            self._log.debug("<< [%d] transport error: %s", ordinal, raw.error)
        else:
            self._log.debug(
                "<< [%d] status=%s elapsed=%.3fs", ordinal, raw.status_code, raw.elapsed
            )
        return Attempt(ordinal=ordinal, raw=raw)

    def _notify_before_retry(self, attempt: Attempt, outcome: Outcome, ordinal: int) -> None:
        handler = self._retry.before_retry
        if handler is not None:
            handler(attempt.raw.request, attempt.raw.response, outcome.error, ordinal)

    def _finish(
        self,
        state: EngineState,
        outcome: Outcome | None,
        schedule: RetrySchedule,
        signal: AbortSignal,
    ) -> Any:
        if state is EngineState.CANCELLED:
            raise CancelledError(signal.reason)
        if state is EngineState.EXHAUSTED:
            raise ExhaustedRetriesError(schedule.max_tries, outcome.error) from outcome.error
        error: GraphQLClientError | None = outcome.error
        if error is not None:
            raise error from error.cause
        return outcome.data

    def _build_headers(self, body: EncodedBody, request: Request) -> httpx.Headers:
        items: list[tuple[str, str]] = [
            ("Content-Type", body.content_type),
            ("Accept", JSON_CONTENT_TYPE),
        ]
        items.extend(self._default_headers.items())
        items.extend(request.headers)
        if self._close_request:
            items.append(("Connection", "close"))
        return httpx.Headers(items)

    def _log_request(self, request: Request, headers: httpx.Headers) -> None:
        self._log.debug(">> variables: %s", request.variables)
        self._log.debug(">> files: %d", len(request.files))
        self._log.debug(">> query: %s", request.query)
        self._log.debug(">> headers: %s", headers.multi_items())
