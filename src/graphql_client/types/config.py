"""Configuration types."""
from __future__ import annotations

import os
import threading
import time
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Callable, Mapping

from graphql_client.errors import CancelledError, ConfigurationError
from graphql_client.types.enums import RetryPolicyKind

if TYPE_CHECKING:
    import httpx

BeforeRetry = Callable[
    ["httpx.Request | None", "httpx.Response | None", "Exception | None", int], None
]

DEFAULT_TRANSIENT_ERROR_NAMES: frozenset[str] = frozenset(
    {"capacity_exceeded", "service_unavailable", "service_failure"}
)


def is_default_retry_status(status: int) -> bool:
    """Default retryable statuses: 429 and the whole 5xx range."""
    return status == 429 or 500 <= status <= 599


@dataclass(frozen=True)
class RetryConfig:
    """Retry behaviour for a client.

    ``interval`` and ``max_interval`` are in seconds. An empty
    ``retry_status`` or ``retry_error_names`` falls back to the defaults.
    """

    policy: RetryPolicyKind = RetryPolicyKind.NONE
    max_tries: int = 1
    interval: float = 1.0
    max_interval: float = 60.0
    retry_status: frozenset[int] = frozenset()
    retry_error_names: frozenset[str] = frozenset()
    before_retry: BeforeRetry | None = field(default=None, compare=False, hash=False)

    @property
    def effective_max_tries(self) -> int:
        """Attempts actually allowed: policy NONE always means one."""
        if self.policy is RetryPolicyKind.NONE:
            return 1
        return self.max_tries

    def should_retry_status(self, status: int) -> bool:
        if self.retry_status:
            return status in self.retry_status
        return is_default_retry_status(status)

    def is_transient_error_name(self, name: str) -> bool:
        names = self.retry_error_names or DEFAULT_TRANSIENT_ERROR_NAMES
        return name in names

    def with_before_retry(self, handler: BeforeRetry | None) -> RetryConfig:
        """Return a copy with *handler* installed as the pre-retry observer."""
        return replace(self, before_retry=handler)

    def validate(self) -> None:
        """Raise :class:`ConfigurationError` if the settings are inconsistent."""
        if not isinstance(self.policy, RetryPolicyKind):
            raise ConfigurationError(f"Unknown retry policy: {self.policy!r}")
        if self.max_tries < 1:
            raise ConfigurationError(f"max_tries must be at least 1, got {self.max_tries}")
        if self.interval <= 0:
            raise ConfigurationError(f"interval must be positive, got {self.interval}")
        if self.policy is RetryPolicyKind.EXPONENTIAL and self.max_interval < self.interval:
            raise ConfigurationError(
                f"max_interval ({self.max_interval}) must not be below interval ({self.interval})"
            )
        for status in self.retry_status:
            if not 100 <= status <= 599:
                raise ConfigurationError(f"Invalid retry status code: {status}")


# Preset configurations
NO_RETRY = RetryConfig()
LINEAR_RETRY = RetryConfig(policy=RetryPolicyKind.LINEAR, max_tries=5, interval=2.0)
EXPONENTIAL_RETRY = RetryConfig(
    policy=RetryPolicyKind.EXPONENTIAL, max_tries=5, interval=1.0, max_interval=16.0
)

PRESET_RETRY_CONFIGS: dict[str, RetryConfig] = {
    "none": NO_RETRY,
    "linear": LINEAR_RETRY,
    "exponential": EXPONENTIAL_RETRY,
}


class AbortSignal:
    """An observable cancellation flag with an optional deadline.

    The deadline is a :func:`time.monotonic` timestamp; once it passes the
    signal reports itself aborted with reason ``"deadline exceeded"``.
    """

    def __init__(self, deadline: float | None = None) -> None:
        self._event = threading.Event()
        self._reason: str | None = None
        self._deadline = deadline

    @property
    def aborted(self) -> bool:
        if not self._event.is_set() and self._deadline is not None:
            if time.monotonic() >= self._deadline:
                self._abort("deadline exceeded")
        return self._event.is_set()

    @property
    def reason(self) -> str | None:
        return self._reason

    def remaining(self) -> float | None:
        """Seconds left before the deadline, or ``None`` without one."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def wait(self, timeout: float) -> bool:
        """Block for up to *timeout* seconds.

        Returns ``True`` as soon as the signal is aborted (explicitly or by
        reaching the deadline), ``False`` if the full timeout elapsed.
        """
        remaining = self.remaining()
        if remaining is not None and remaining <= timeout:
            if self._event.wait(remaining):
                return True
            self._abort("deadline exceeded")
            return True
        return self._event.wait(timeout)

    def raise_if_aborted(self) -> None:
        if self.aborted:
            raise CancelledError(self._reason)

    def _abort(self, reason: str) -> None:
        if not self._event.is_set():
            self._reason = reason
            self._event.set()


class AbortController:
    """Controls an :class:`AbortSignal` to cancel an in-flight call."""

    def __init__(self, timeout: float | None = None) -> None:
        deadline = time.monotonic() + timeout if timeout is not None else None
        self.signal = AbortSignal(deadline=deadline)

    def abort(self, reason: str = "aborted by caller") -> None:
        self.signal._abort(reason)


# ---------------------------------------------------------------------------
# Client configuration
# ---------------------------------------------------------------------------


def _env_float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{key} must be a number, got {raw!r}") from None


def _env_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{key} must be an integer, got {raw!r}") from None


def parse_policy(value: str) -> RetryPolicyKind:
    """Parse a policy name, accepting ``exponential_backoff`` as an alias."""
    normalized = value.strip().lower()
    if normalized == "exponential_backoff":
        normalized = RetryPolicyKind.EXPONENTIAL.value
    try:
        return RetryPolicyKind(normalized)
    except ValueError:
        raise ConfigurationError(f"Unknown retry policy: {value!r}") from None


def parse_status_list(value: str) -> frozenset[int]:
    """Parse a comma separated list of status codes."""
    codes: set[int] = set()
    for part in value.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            codes.add(int(part))
        except ValueError:
            raise ConfigurationError(f"Invalid status code: {part!r}") from None
    return frozenset(codes)


@dataclass(frozen=True)
class ClientConfig:
    """Settings a :class:`~graphql_client.client.Client` is built from."""

    endpoint: str
    retry: RetryConfig = NO_RETRY
    default_headers: dict[str, str] = field(default_factory=dict)
    use_multipart: bool = False
    close_request: bool = False

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> ClientConfig:
        """Read settings from ``GRAPHQL_*`` environment variables.

        ``GRAPHQL_ENDPOINT`` is required. When ``GRAPHQL_RETRY_POLICY`` is set
        the matching preset supplies defaults for the other retry variables.
        """
        env = os.environ if env is None else env
        endpoint = env.get("GRAPHQL_ENDPOINT", "")
        if not endpoint:
            raise ConfigurationError("GRAPHQL_ENDPOINT is not set")

        policy_name = env.get("GRAPHQL_RETRY_POLICY", "")
        base = NO_RETRY
        if policy_name:
            base = PRESET_RETRY_CONFIGS[parse_policy(policy_name).value]

        retry = replace(
            base,
            max_tries=_env_int(env, "GRAPHQL_MAX_TRIES", base.max_tries),
            interval=_env_float(env, "GRAPHQL_RETRY_INTERVAL", base.interval),
            max_interval=_env_float(env, "GRAPHQL_MAX_RETRY_INTERVAL", base.max_interval),
            retry_status=parse_status_list(env.get("GRAPHQL_RETRY_STATUS", "")),
        )
        retry.validate()

        use_multipart = env.get("GRAPHQL_USE_MULTIPART", "").strip().lower() in (
            "1",
            "true",
            "yes",
        )
        return cls(endpoint=endpoint, retry=retry, use_multipart=use_multipart)
