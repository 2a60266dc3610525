"""Response envelope decoding and application error aggregation."""
from __future__ import annotations

import json
from collections.abc import MutableMapping, Sequence
from typing import Any

from graphql_client.errors import ApplicationError, ConfigurationError, DecodeError
from graphql_client.types.response import Envelope, GraphQLErrorEntry


def decode_envelope(content: bytes, target: Any = None) -> Envelope:
    """Decode a ``{"data": ..., "errors": [...]}`` body.

    ``data`` is applied to *target* in place when both are present, even if
    the envelope also carries errors. Raises :class:`DecodeError` when the
    body is not a structurally valid envelope; an empty object is valid.
    """
    try:
        body = json.loads(content)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise DecodeError(f"decoding response: {exc}", raw_body=content, cause=exc) from exc

    if not isinstance(body, dict):
        raise DecodeError(
            f"decoding response: expected an object, got {type(body).__name__}",
            raw_body=content,
        )

    errors = _decode_errors(body.get("errors"), content)
    data = body.get("data")
    if data is not None and target is not None:
        apply_data(target, data)
    return Envelope(data=data, errors=errors)


def _decode_errors(raw: Any, content: bytes) -> tuple[GraphQLErrorEntry, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise DecodeError("decoding response: 'errors' is not a list", raw_body=content)
    entries: list[GraphQLErrorEntry] = []
    for item in raw:
        if not isinstance(item, dict):
            raise DecodeError("decoding response: error entry is not an object", raw_body=content)
        entries.append(
            GraphQLErrorEntry(
                name=str(item.get("name") or ""),
                message=str(item.get("message") or ""),
                data=item.get("data"),
            )
        )
    return tuple(entries)


def apply_data(target: Any, data: Any) -> None:
    """Copy decoded ``data`` into *target*.

    Mappings are updated; any other object gets one attribute per key.
    Non-object data can only be delivered through the return value. Raises
    :class:`ConfigurationError` when *target* accepts neither.
    """
    if not isinstance(data, dict):
        return
    if isinstance(target, MutableMapping):
        target.update(data)
        return
    try:
        for key, value in data.items():
            setattr(target, key, value)
    except (AttributeError, TypeError) as exc:
        raise ConfigurationError(
            f"cannot populate response target of type {type(target).__name__}", cause=exc
        ) from exc


def format_errors(errors: Sequence[GraphQLErrorEntry]) -> str:
    """Render entries in index order: ``graphql: error 0: name (x), message (y); ...``."""
    parts = [
        f"error {i}: name ({e.name}), message ({e.message})"
        for i, e in enumerate(errors)
    ]
    return "graphql: " + "; ".join(parts)


def aggregate_errors(
    errors: Sequence[GraphQLErrorEntry],
    *,
    data: Any = None,
    status_code: int | None = None,
    retryable: bool = False,
) -> ApplicationError:
    """Fold one or more envelope errors into a single :class:`ApplicationError`."""
    return ApplicationError(
        format_errors(errors),
        errors=tuple(errors),
        data=data,
        status_code=status_code,
        retryable=retryable,
    )
