"""Built-in observer hooks."""
from __future__ import annotations

import logging
from typing import Any, Callable

import httpx

from graphql_client.types.config import BeforeRetry

DEFAULT_LOGGER_NAME = "graphql_client"


def log_before_retry(logger: logging.Logger | None = None) -> BeforeRetry:
    """Create a ``before_retry`` callback that logs the attempt being retried."""
    log = logger or logging.getLogger(DEFAULT_LOGGER_NAME)

    def before_retry(
        request: httpx.Request | None,
        response: httpx.Response | None,
        error: Exception | None,
        attempt: int,
    ) -> None:
        status = response.status_code if response is not None else None
        target = f"{request.method} {request.url}" if request is not None else "-"
        log.info(
            "Retrying request: %s attempt=%d status=%s error=%s",
            target,
            attempt,
            status,
            error,
        )

    return before_retry


def log_connection_trace(
    logger: logging.Logger | None = None,
) -> Callable[[str, dict[str, Any]], None]:
    """Create an httpx ``trace`` extension callback that logs connection events.

    Failed events are logged at warning level, everything else at debug.
    """
    log = logger or logging.getLogger(DEFAULT_LOGGER_NAME)

    def trace(event_name: str, info: dict[str, Any]) -> None:
        if event_name.endswith(".failed"):
            log.warning("%s: %s", event_name, info.get("exception"))
        elif event_name == "connection.connect_tcp.complete":
            log.debug("Connection established: %s", info.get("return_value"))
        else:
            log.debug("%s", event_name)

    return trace
