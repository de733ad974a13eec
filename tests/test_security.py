from __future__ import annotations

from datetime import datetime, timedelta, timezone
from email.utils import format_datetime

import pytest

from apify_client.client import ApifyClient
from apify_client.exceptions import InvalidParameterTypeError
from apify_client.security import parse_retry_after, redact_url, validate_base_url


def test_loopback_hosts_may_use_plain_http() -> None:
    validate_base_url("http://localhost:3000")
    validate_base_url("http://127.0.0.1:8080/v2")

    with pytest.raises(ValueError, match="allow_http"):
        validate_base_url("http://api.apify.com")


@pytest.mark.parametrize(
    ("url", "message"),
    [
        ("ftp://api.apify.com", "must use http or https"),
        ("https://", "must include a host"),
        ("https://api.apify.com\x00", "NUL character"),
    ],
)
def test_malformed_base_urls_are_rejected(url: str, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        validate_base_url(url)


def test_client_reports_base_url_option_in_error() -> None:
    with pytest.raises(InvalidParameterTypeError) as exc_info:
        ApifyClient(environ={}, base_url="ftp://api.apify.com")

    assert exc_info.value.parameter == "base_url"
    assert "options.base_url" in str(exc_info.value)


def test_retry_after_accepts_seconds_and_http_dates() -> None:
    assert parse_retry_after(" 12 ") == 12.0
    assert parse_retry_after("-3") == 0.0
    assert parse_retry_after("") is None
    assert parse_retry_after(None) is None
    assert parse_retry_after("soon") is None

    later = datetime.now(timezone.utc) + timedelta(seconds=120)
    assert 100.0 <= parse_retry_after(format_datetime(later, usegmt=True)) <= 120.0
    earlier = datetime.now(timezone.utc) - timedelta(hours=1)
    assert parse_retry_after(format_datetime(earlier, usegmt=True)) == 0.0


def test_redact_url_hides_token() -> None:
    assert redact_url("https://api.apify.com/v2/acts?token=secret&limit=1") == (
        "https://api.apify.com/v2/acts?token=[REDACTED]&limit=1"
    )
