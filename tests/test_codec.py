from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest

from apify_client.codec import decode_body, encode_body, json_dumps, parse_date_fields, pluck_data
from apify_client.exceptions import InvalidParameterTypeError, InvalidResponseError


def test_parse_date_fields_converts_known_fields_recursively() -> None:
    payload = {
        "id": "abc",
        "createdAt": "2017-06-07T13:53:41.123Z",
        "name": "2017-06-07T13:53:41.123Z",
        "stats": {"finishedAt": "2017-06-07T14:00:00.000Z"},
        "items": [{"startedAt": "2017-06-07T13:54:00.500Z"}],
    }

    parsed = parse_date_fields(payload)

    assert parsed["createdAt"] == datetime(2017, 6, 7, 13, 53, 41, 123000, tzinfo=timezone.utc)
    assert parsed["stats"]["finishedAt"] == datetime(2017, 6, 7, 14, 0, tzinfo=timezone.utc)
    assert parsed["items"][0]["startedAt"].microsecond == 500000
    assert parsed["name"] == "2017-06-07T13:53:41.123Z"
    assert parsed["id"] == "abc"


def test_parse_date_fields_leaves_unparseable_values() -> None:
    assert parse_date_fields({"createdAt": "yesterday"}) == {"createdAt": "yesterday"}


def test_datetime_survives_json_encoding_to_millisecond_precision() -> None:
    original = datetime(2020, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)

    encoded = json_dumps({"createdAt": original})

    assert json.loads(encoded) == {"createdAt": "2020-01-02T03:04:05.678Z"}
    assert parse_date_fields(json.loads(encoded))["createdAt"] == original


def test_encode_body_json_and_passthrough() -> None:
    assert encode_body({"a": 1}, "application/json; charset=utf-8") == b'{"a": 1}'
    assert encode_body("text", "text/plain") == b"text"
    assert encode_body(b"\x00\x01", "application/octet-stream") == b"\x00\x01"
    assert encode_body(None, "application/json") is None


def test_encode_body_rejects_structured_value_for_non_json_type() -> None:
    with pytest.raises(InvalidParameterTypeError) as exc_info:
        encode_body({"a": 1}, "text/plain")

    assert exc_info.value.parameter == "body"


def test_decode_body_by_content_type() -> None:
    assert decode_body(b'{"a": [1, 2]}', "application/json; charset=utf-8") == {"a": [1, 2]}
    assert decode_body(b"hello", "text/plain") == "hello"
    assert decode_body(b"<a/>", "application/xml") == "<a/>"
    assert decode_body(b"\x89PNG", "image/png") == b"\x89PNG"
    assert decode_body(b"", "application/json") is None


def test_decode_body_raises_on_malformed_json() -> None:
    with pytest.raises(InvalidResponseError) as exc_info:
        decode_body(b"{not json", "application/json")

    assert exc_info.value.body == "{not json"


def test_pluck_data_unwraps_envelope_only() -> None:
    assert pluck_data({"data": {"id": 1}}) == {"id": 1}
    assert pluck_data({"id": 1}) == {"id": 1}
    assert pluck_data([1, 2]) == [1, 2]
