"""Request body encoding: JSON or multipart/form-data."""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

import httpx

from graphql_client.errors import ConfigurationError
from graphql_client.types.request import Request

JSON_CONTENT_TYPE = "application/json; charset=utf-8"
FILE_CONTENT_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class EncodedBody:
    """A request body captured once and replayed on every attempt."""

    content: bytes
    content_type: str

    def replay(self) -> bytes:
        return self.content


def encode_request(request: Request, *, multipart: bool, url: str) -> EncodedBody:
    """Encode *request* for a POST to *url* and seal it.

    File sources are read here exactly once. Raises
    :class:`ConfigurationError` if the request carries files outside
    multipart mode, or if the variables cannot be serialised.
    """
    if request.files and not multipart:
        raise ConfigurationError("cannot send files without multipart form support")
    request.seal()
    if multipart:
        return _encode_multipart(request, url)
    return _encode_json(request)


def _dump_json(value: Any, what: str) -> bytes:
    """Compact JSON terminated by a newline."""
    try:
        text = json.dumps(value, separators=(",", ":"))
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"encode {what}: {exc}", cause=exc) from exc
    return (text + "\n").encode("utf-8")


def _encode_json(request: Request) -> EncodedBody:
    payload = {"query": request.query, "variables": request.variables}
    return EncodedBody(content=_dump_json(payload, "body"), content_type=JSON_CONTENT_TYPE)


def _encode_multipart(request: Request, url: str) -> EncodedBody:
    # (None, value) keeps plain fields inside httpx's multipart encoder.
    fields: list[tuple[str, tuple[Any, ...]]] = [("query", (None, request.query.encode("utf-8")))]
    if request.variables:
        fields.append(("variables", (None, _dump_json(request.variables, "variables"))))
    for f in request.files:
        try:
            data = f.read_bytes()
        except OSError as exc:
            raise ConfigurationError(f"preparing file {f.name!r}: {exc}", cause=exc) from exc
        fields.append((f.field, (f.name, data, FILE_CONTENT_TYPE)))

    prepared = httpx.Request("POST", url, files=fields)
    return EncodedBody(content=prepared.read(), content_type=prepared.headers["Content-Type"])
