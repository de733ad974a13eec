"""Request body encoding and response body decoding."""

from __future__ import annotations

import asyncio
import gzip
import json
from datetime import datetime, timezone
from typing import Any, Mapping

from .exceptions import InvalidParameterTypeError, InvalidResponseError


JSON_CONTENT_TYPE = "application/json"
JSON_CONTENT_TYPE_UTF8 = "application/json; charset=utf-8"

DATE_FIELDS = frozenset(
    {
        "createdAt",
        "modifiedAt",
        "startedAt",
        "finishedAt",
        "queueModifiedAt",
        "accessedAt",
        "handledAt",
        "lastRunAt",
        "nextRunAt",
        "expiresAt",
    }
)


def mime_type(content_type: str | None) -> str:
    """Return the bare, lower-cased MIME type of a Content-Type value."""
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def is_json_content_type(content_type: str | None) -> bool:
    return mime_type(content_type) == JSON_CONTENT_TYPE


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        value = value.astimezone(timezone.utc)
        return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def json_dumps(value: Any) -> str:
    return json.dumps(value, default=_json_default, ensure_ascii=False)


def encode_body(body: Any, content_type: str | None) -> bytes | None:
    """Serialize a request body into the bytes sent on the wire.

    Structured values are JSON-encoded when the content type is JSON; strings are
    UTF-8 encoded; binary buffers pass through unchanged.
    """
    if body is None:
        return None
    if isinstance(body, (bytes, bytearray, memoryview)):
        return bytes(body)
    if isinstance(body, str):
        return body.encode("utf-8")
    if is_json_content_type(content_type):
        return json_dumps(body).encode("utf-8")
    raise InvalidParameterTypeError(
        f"Cannot encode body of type {type(body).__name__} as {content_type or 'unknown content type'}",
        parameter="body",
    )


def gzip_body(data: bytes) -> bytes:
    return gzip.compress(data)


async def gzip_body_async(data: bytes) -> bytes:
    return await asyncio.to_thread(gzip.compress, data)


def decode_body(body: bytes | str | None, content_type: str | None) -> Any:
    """Decode a response body according to its declared content type."""
    if body is None:
        return None
    mime = mime_type(content_type)
    if mime == JSON_CONTENT_TYPE:
        if isinstance(body, (bytes, bytearray)):
            if not body:
                return None
            try:
                text = bytes(body).decode("utf-8")
            except UnicodeDecodeError as exc:
                raise InvalidResponseError("Response body is not valid UTF-8 JSON", body=body, cause=exc) from exc
        else:
            text = body
        if not text.strip():
            return None
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise InvalidResponseError(
                f"Response body could not be parsed as JSON: {exc.msg}",
                body=text,
                cause=exc,
            ) from exc
    if isinstance(body, (bytes, bytearray)) and (mime.startswith("text/") or mime in {"application/xml", "application/rss+xml"}):
        return bytes(body).decode("utf-8", errors="replace")
    return body


def _parse_date(value: str) -> datetime | str:
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_date_fields(value: Any) -> Any:
    """Convert string values of known date fields into ``datetime`` objects.

    Walks dictionaries and lists recursively, so entities nested in ``items``
    are converted as well.
    """
    if isinstance(value, list):
        return [parse_date_fields(item) for item in value]
    if not isinstance(value, dict):
        return value
    parsed: dict[str, Any] = {}
    for key, item in value.items():
        if key in DATE_FIELDS and isinstance(item, str):
            parsed[key] = _parse_date(item)
        elif isinstance(item, (dict, list)):
            parsed[key] = parse_date_fields(item)
        else:
            parsed[key] = item
    return parsed


def pluck_data(payload: Any) -> Any:
    """Unwrap the ``{"data": ...}`` envelope most endpoints respond with."""
    if isinstance(payload, Mapping) and "data" in payload:
        return payload["data"]
    return payload
