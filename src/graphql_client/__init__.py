"""GraphQL client with a retry-driving execution engine."""
from __future__ import annotations

__version__ = "0.1.0"

# Types - Enums
from graphql_client.types.enums import (
    EngineEvent,
    EngineState,
    FailureReason,
    OutcomeKind,
    RetryAction,
    RetryPolicyKind,
)

# Types - Request/Response
from graphql_client.types.request import File, Request
from graphql_client.types.response import Envelope, GraphQLErrorEntry, Outcome

# Types - Config
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

# Errors
from graphql_client.errors import (
    GraphQLClientError,
    ConfigurationError,
    TransportError,
    RequestTimeoutError,
    NetworkError,
    StatusError,
    DecodeError,
    ApplicationError,
    ExhaustedRetriesError,
    CancelledError,
)

# Core
from graphql_client._http import HttpTransport, Transport
from graphql_client.engine import ExecutionEngine, transition
from graphql_client.client import Client

# Hooks
from graphql_client.hooks import log_before_retry, log_connection_trace

__all__ = [
    "__version__",
    # Enums
    "EngineEvent",
    "EngineState",
    "FailureReason",
    "OutcomeKind",
    "RetryAction",
    "RetryPolicyKind",
    # Request/Response
    "File",
    "Request",
    "Envelope",
    "GraphQLErrorEntry",
    "Outcome",
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
    # Errors
    "GraphQLClientError",
    "ConfigurationError",
    "TransportError",
    "RequestTimeoutError",
    "NetworkError",
    "StatusError",
    "DecodeError",
    "ApplicationError",
    "ExhaustedRetriesError",
    "CancelledError",
    # Core
    "HttpTransport",
    "Transport",
    "ExecutionEngine",
    "transition",
    "Client",
    # Hooks
    "log_before_retry",
    "log_connection_trace",
]
