"""GraphQL client type definitions."""
from __future__ import annotations

from graphql_client.types.enums import (
    EngineEvent,
    EngineState,
    FailureReason,
    OutcomeKind,
    RetryAction,
    RetryPolicyKind,
)
from graphql_client.types.request import File, Request
from graphql_client.types.response import (
    Attempt,
    Decision,
    Envelope,
    GraphQLErrorEntry,
    Outcome,
    RawResponse,
)
from graphql_client.types.config import (
    DEFAULT_TRANSIENT_ERROR_NAMES,
    EXPONENTIAL_RETRY,
    LINEAR_RETRY,
    NO_RETRY,
    PRESET_RETRY_CONFIGS,
    AbortController,
    AbortSignal,
    ClientConfig,
    RetryConfig,
)

__all__ = [
    # Enums
    "EngineEvent",
    "EngineState",
    "FailureReason",
    "OutcomeKind",
    "RetryAction",
    "RetryPolicyKind",
    # Request
    "File",
    "Request",
    # Response
    "Attempt",
    "Decision",
    "Envelope",
    "GraphQLErrorEntry",
    "Outcome",
    "RawResponse",
    # Config
    "DEFAULT_TRANSIENT_ERROR_NAMES",
    "EXPONENTIAL_RETRY",
    "LINEAR_RETRY",
    "NO_RETRY",
    "PRESET_RETRY_CONFIGS",
    "AbortController",
    "AbortSignal",
    "ClientConfig",
    "RetryConfig",
]
