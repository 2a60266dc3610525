"""Enumeration types for the GraphQL client."""
from __future__ import annotations

from enum import StrEnum


class RetryPolicyKind(StrEnum):
    """How the interval between attempts evolves."""

    NONE = "none"
    LINEAR = "linear"
    EXPONENTIAL = "exponential"


class OutcomeKind(StrEnum):
    """Classification of a single attempt."""

    SUCCESS = "success"
    RETRYABLE = "retryable"
    TERMINAL = "terminal"


class FailureReason(StrEnum):
    """Which failure domain produced an attempt's error."""

    TRANSPORT = "transport"
    STATUS = "status"
    DECODE = "decode"
    APPLICATION = "application"


class RetryAction(StrEnum):
    """What the retry policy tells the engine to do next."""

    STOP = "stop"
    RETRY = "retry"
    EXHAUSTED = "exhausted"


class EngineState(StrEnum):
    """States of one logical call."""

    ATTEMPTING = "attempting"
    EVALUATING = "evaluating"
    WAITING = "waiting"
    SUCCEEDED = "succeeded"
    EXHAUSTED = "exhausted"
    CANCELLED = "cancelled"

    @property
    def terminal(self) -> bool:
        return self in (EngineState.SUCCEEDED, EngineState.EXHAUSTED, EngineState.CANCELLED)


class EngineEvent(StrEnum):
    """Inputs that drive the engine's transition table."""

    SENT = "sent"
    STOP = "stop"
    RETRY = "retry"
    EXHAUST = "exhaust"
    TIMER_FIRED = "timer_fired"
    CANCEL = "cancel"
