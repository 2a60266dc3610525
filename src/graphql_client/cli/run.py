"""CLI command: graphql-client run -- send one query and print the data."""

from __future__ import annotations

import json
import logging
import sys
from contextlib import ExitStack
from dataclasses import replace
from pathlib import Path
from typing import Any

import click

from graphql_client.client import Client
from graphql_client.errors import ApplicationError, GraphQLClientError
from graphql_client.hooks import log_before_retry, log_connection_trace
from graphql_client.types.config import (
    NO_RETRY,
    PRESET_RETRY_CONFIGS,
    AbortController,
    RetryConfig,
    parse_policy,
)
from graphql_client.types.request import Request


def _parse_pair(raw: str, sep: str, what: str) -> tuple[str, str]:
    key, found, value = raw.partition(sep)
    if not found or not key.strip():
        raise click.BadParameter(f"expected KEY{sep}VALUE, got {raw!r}", param_hint=what)
    return key.strip(), value.strip() if sep == ":" else value


def _parse_value(raw: str) -> Any:
    """Variables are JSON when they parse as JSON, plain strings otherwise."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def _read_query(query: str) -> str:
    if query.startswith("@"):
        return Path(query[1:]).read_text(encoding="utf-8")
    return query


def _build_retry(
    policy: str | None,
    max_tries: int | None,
    interval: float | None,
    max_interval: float | None,
    retry_status: tuple[int, ...],
) -> RetryConfig:
    tuning = max_tries is not None or interval is not None or max_interval is not None
    if policy is None and (tuning or retry_status):
        raise click.UsageError(
            "--max-tries, --interval, --max-interval and --retry-status require --policy"
        )
    base = PRESET_RETRY_CONFIGS[parse_policy(policy).value] if policy else NO_RETRY
    overrides: dict[str, Any] = {}
    if max_tries is not None:
        overrides["max_tries"] = max_tries
    if interval is not None:
        overrides["interval"] = interval
    if max_interval is not None:
        overrides["max_interval"] = max_interval
    if retry_status:
        overrides["retry_status"] = frozenset(retry_status)
    return replace(base, **overrides)


@click.command()
@click.argument("endpoint")
@click.argument("query")
@click.option("--var", "variables", multiple=True, help="Variable as KEY=VALUE (VALUE may be JSON)")
@click.option("--file", "files", multiple=True, help="File upload as FIELD=PATH (needs --multipart)")
@click.option("--header", "headers", multiple=True, help="Extra header as 'Key: Value'")
@click.option("--multipart", is_flag=True, help="Send the request as multipart/form-data")
@click.option(
    "--policy",
    type=click.Choice(["none", "linear", "exponential"]),
    default=None,
    help="Retry policy preset",
)
@click.option("--max-tries", type=int, default=None, help="Maximum number of attempts")
@click.option("--interval", type=float, default=None, help="Seconds to wait before retrying")
@click.option("--max-interval", type=float, default=None, help="Cap for exponential backoff")
@click.option("--retry-status", type=int, multiple=True, help="Status code to retry on")
@click.option("--timeout", type=float, default=None, help="Overall deadline in seconds")
@click.option("--verbose", "-v", is_flag=True, help="Log attempts and retries")
def run(
    endpoint: str,
    query: str,
    variables: tuple[str, ...],
    files: tuple[str, ...],
    headers: tuple[str, ...],
    multipart: bool,
    policy: str | None,
    max_tries: int | None,
    interval: float | None,
    max_interval: float | None,
    retry_status: tuple[int, ...],
    timeout: float | None,
    verbose: bool,
) -> None:
    """Send QUERY to ENDPOINT and print the response data as JSON.

    Prefix QUERY with @ to read it from a file.
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        retry = _build_retry(policy, max_tries, interval, max_interval, retry_status)
        if verbose:
            retry = retry.with_before_retry(log_before_retry())
        client = Client(
            endpoint,
            retry=retry,
            use_multipart=multipart,
            trace=log_connection_trace() if verbose else None,
        )
    except GraphQLClientError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    signal = AbortController(timeout=timeout).signal if timeout is not None else None

    with ExitStack() as stack:
        stack.callback(client.close)
        request = Request(query=_read_query(query))
        for raw in variables:
            key, value = _parse_pair(raw, "=", "--var")
            request.var(key, _parse_value(value))
        for raw in headers:
            key, value = _parse_pair(raw, ":", "--header")
            request.add_header(key, value)
        for raw in files:
            field_name, path = _parse_pair(raw, "=", "--file")
            try:
                handle = stack.enter_context(open(path, "rb"))
            except OSError as exc:
                raise click.BadParameter(str(exc), param_hint="--file") from exc
            request.file(field_name, Path(path).name, handle)

        try:
            data = client.run(request, signal=signal)
        except ApplicationError as exc:
            click.echo(f"Error: {exc}", err=True)
            if exc.data is not None:
                click.echo(json.dumps(exc.data, indent=2))
            sys.exit(1)
        except GraphQLClientError as exc:
            click.echo(f"Error: {exc}", err=True)
            sys.exit(1)

    click.echo(json.dumps(data, indent=2))
