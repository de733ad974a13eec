"""URL safety and redaction helpers."""

from __future__ import annotations

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse


SENSITIVE_QUERY_PARAMS = frozenset({"token"})

REDACTED_VALUE = "[REDACTED]"

LOOPBACK_HOSTS = frozenset({"localhost", "127.0.0.1", "::1"})


def redact_url(url: str) -> str:
    """Return the URL with sensitive query values redacted for logging."""
    parsed = urlparse(url)
    if not parsed.query:
        return url
    query = [
        (key, REDACTED_VALUE if key.lower() in SENSITIVE_QUERY_PARAMS else value)
        for key, value in parse_qsl(parsed.query, keep_blank_values=True)
    ]
    return urlunparse(parsed._replace(query=urlencode(query, safe="[]")))


def validate_base_url(url: str, *, allow_http: bool = False) -> None:
    """Reject API base URLs that would leak the token or are not HTTP(S).

    Plain ``http`` is only accepted for loopback hosts such as a local API
    emulator, unless ``allow_http`` is set.
    """
    if "\x00" in url:
        raise ValueError("options.base_url contains a NUL character")
    parsed = urlparse(url)
    if parsed.scheme not in {"http", "https"}:
        raise ValueError(f"options.base_url must use http or https, got {parsed.scheme or 'no scheme'!r}")
    if not parsed.netloc:
        raise ValueError("options.base_url must include a host")
    if parsed.scheme == "http" and not allow_http and (parsed.hostname or "").lower() not in LOOPBACK_HOSTS:
        raise ValueError("options.base_url uses plain http; pass allow_http=True to send the token unencrypted")


def parse_retry_after(raw: str | None) -> float | None:
    """Seconds to wait according to a ``Retry-After`` header.

    Accepts both delta-seconds and HTTP-date forms; dates in the past yield 0.
    """
    value = (raw or "").strip()
    if not value:
        return None
    try:
        return max(0.0, float(value))
    except ValueError:
        pass
    try:
        moment = parsedate_to_datetime(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if moment is None:
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return max(0.0, (moment - datetime.now(timezone.utc)).total_seconds())
