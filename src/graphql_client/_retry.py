"""Retry decisions and per-call backoff state."""
from __future__ import annotations

from dataclasses import dataclass

from graphql_client.types.config import RetryConfig
from graphql_client.types.enums import RetryAction, RetryPolicyKind
from graphql_client.types.response import Decision, Outcome


@dataclass
class RetrySchedule:
    """Mutable interval state for one logical call.

    Built from a frozen :class:`RetryConfig` at call start so interval growth
    never leaks into other calls sharing the same client.
    """

    config: RetryConfig
    interval: float

    @classmethod
    def start(cls, config: RetryConfig) -> RetrySchedule:
        return cls(config=config, interval=config.interval)

    @property
    def max_tries(self) -> int:
        return self.config.effective_max_tries

    def advance(self) -> float:
        """Grow the interval after a completed wait and return the new value.

        Exponential doubles up to ``max_interval`` and stays there; linear
        keeps the interval constant.
        """
        if self.config.policy is RetryPolicyKind.EXPONENTIAL:
            self.interval = min(self.interval * 2, self.config.max_interval)
        return self.interval


def decide(schedule: RetrySchedule, ordinal: int, outcome: Outcome) -> Decision:
    """Decide what follows attempt *ordinal* (1-based).

    Policy NONE and non-retryable outcomes stop immediately. A retryable
    outcome on the last allowed attempt is exhaustion, with no wait.
    """
    if schedule.config.policy is RetryPolicyKind.NONE or not outcome.retryable:
        return Decision(RetryAction.STOP)
    if ordinal >= schedule.max_tries:
        return Decision(RetryAction.EXHAUSTED)
    return Decision(RetryAction.RETRY, wait=schedule.interval)
