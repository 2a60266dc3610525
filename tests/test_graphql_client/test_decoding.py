"""Tests for envelope decoding and error aggregation."""
from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import pytest

from graphql_client._decoding import aggregate_errors, apply_data, decode_envelope, format_errors
from graphql_client.errors import ApplicationError, ConfigurationError, DecodeError
from graphql_client.types.response import GraphQLErrorEntry


# ---------------------------------------------------------------------------
# decode_envelope
# ---------------------------------------------------------------------------


class TestDecodeEnvelope:
    def test_data_only(self) -> None:
        target: dict[str, Any] = {}
        env = decode_envelope(b'{"data": {"something": "yes"}}', target)
        assert env.data == {"something": "yes"}
        assert env.errors == ()
        assert not env.has_errors
        assert target == {"something": "yes"}

    def test_empty_object_is_valid(self) -> None:
        env = decode_envelope(b"{}")
        assert env.data is None
        assert env.errors == ()

    def test_partial_success(self) -> None:
        target: dict[str, Any] = {}
        env = decode_envelope(
            b'{"data": {"something": "no"}, "errors": [{"name": "service_failure"}]}', target
        )
        assert target["something"] == "no"
        assert env.errors == (GraphQLErrorEntry(name="service_failure"),)

    def test_error_fields(self) -> None:
        env = decode_envelope(
            b'{"errors": [{"name": "n", "message": "m", "data": {"x": 1}}, {"message": "only"}]}'
        )
        assert env.errors[0] == GraphQLErrorEntry(name="n", message="m", data={"x": 1})
        assert env.errors[1].name == ""
        assert env.errors[1].message == "only"

    def test_no_target(self) -> None:
        assert decode_envelope(b'{"data": {"a": 1}}').data == {"a": 1}

    @pytest.mark.parametrize(
        "body",
        [
            b"not json",
            b"<html></html>",
            b"[1, 2]",
            b"null",
            b'{"errors": "boom"}',
            b'{"errors": ["boom"]}',
            b"\x80\x81",
        ],
    )
    def test_invalid_bodies(self, body: bytes) -> None:
        with pytest.raises(DecodeError) as exc_info:
            decode_envelope(body)
        assert exc_info.value.raw_body == body


# ---------------------------------------------------------------------------
# apply_data
# ---------------------------------------------------------------------------


class TestApplyData:
    def test_mapping_updated_in_place(self) -> None:
        target = {"keep": 1, "something": "old"}
        apply_data(target, {"something": "new"})
        assert target == {"keep": 1, "something": "new"}

    def test_object_attributes(self) -> None:
        target = SimpleNamespace()
        apply_data(target, {"a": 1, "b": "two"})
        assert target.a == 1
        assert target.b == "two"

    @pytest.mark.parametrize("target", [(), "text", 3])
    def test_unsupported_target(self, target: Any) -> None:
        with pytest.raises(ConfigurationError, match="cannot populate response target"):
            apply_data(target, {"a": 1})

    def test_non_object_data_ignored(self) -> None:
        target: dict[str, Any] = {}
        apply_data(target, [1, 2])
        assert target == {}


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


class TestAggregateErrors:
    def test_single_entry_format(self) -> None:
        text = format_errors(
            [GraphQLErrorEntry(name="not_found", message="Requested object was not found")]
        )
        assert text == "graphql: error 0: name (not_found), message (Requested object was not found)"

    def test_index_ordered(self) -> None:
        text = format_errors(
            [GraphQLErrorEntry(name="a", message="1"), GraphQLErrorEntry(name="b", message="2")]
        )
        assert text == "graphql: error 0: name (a), message (1); error 1: name (b), message (2)"

    def test_aggregate_builds_single_error(self) -> None:
        entries = [GraphQLErrorEntry(name="a"), GraphQLErrorEntry(name="b")]
        err = aggregate_errors(entries, data={"x": 1}, status_code=200, retryable=True)
        assert isinstance(err, ApplicationError)
        assert err.names == ["a", "b"]
        assert err.data == {"x": 1}
        assert err.status_code == 200
        assert err.retryable is True
        assert "error 1: name (b)" in str(err)
