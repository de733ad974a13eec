"""Exponential-backoff retry shared by every request."""

from __future__ import annotations

import asyncio
import random
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

import httpx
import structlog

from .exceptions import RequestFailedError
from .security import parse_retry_after, redact_url


logger = structlog.get_logger()

T = TypeVar("T")

RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})
RETRYABLE_TRANSPORT_ERRORS = (httpx.TimeoutException, httpx.NetworkError, httpx.RemoteProtocolError)
REQUEST_QUEUE_MAX_RETRIES = 9
MAX_RETRY_AFTER_SECONDS = 60.0


class RetryableResponse(Exception):
    """Signals a response whose status warrants another attempt."""

    def __init__(self, response: httpx.Response) -> None:
        super().__init__(f"Retryable status {response.status_code}")
        self.response = response


@dataclass(frozen=True)
class RetryPolicy:
    max_retries: int = 8
    base_delay: float = 0.5
    max_delay: float = 128.0
    jitter_ratio: float = 0.1
    max_elapsed: float | None = None

    def delay_for(self, attempt: int, retry_after: float | None = None) -> float:
        """Seconds to wait before retry number ``attempt + 1``."""
        delay = self.base_delay * (2**attempt)
        delay += random.uniform(0, self.jitter_ratio * delay)
        if retry_after is not None:
            delay = max(delay, min(retry_after, MAX_RETRY_AFTER_SECONDS))
        return min(self.max_delay, delay)


@dataclass
class BackoffState:
    policy: RetryPolicy
    attempt: int = 0
    started_at: float = 0.0

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.started_at

    def exhausted(self, next_delay: float = 0.0) -> bool:
        if self.attempt >= self.policy.max_retries:
            return True
        max_elapsed = self.policy.max_elapsed
        return max_elapsed is not None and self.elapsed + next_delay > max_elapsed


def is_retryable_status(status_code: int) -> bool:
    return status_code in RETRYABLE_STATUS_CODES


def _failure_details(error: Exception) -> tuple[int | None, float | None, str]:
    if isinstance(error, RetryableResponse):
        response = error.response
        retry_after = parse_retry_after(response.headers.get("Retry-After"))
        return response.status_code, retry_after, f"Server responded with status {response.status_code}"
    return None, None, f"{type(error).__name__}: {error}"


def _exhausted_error(state: BackoffState, error: Exception, url: str) -> RequestFailedError:
    status_code, _, reason = _failure_details(error)
    response = error.response if isinstance(error, RetryableResponse) else None
    body = None
    if response is not None:
        try:
            body = response.text
        except (httpx.ResponseNotRead, UnicodeDecodeError):
            body = None
    logger.warning(
        "request_failed",
        url=redact_url(url),
        status_code=status_code,
        attempt=state.attempt,
        elapsed=round(state.elapsed, 3),
    )
    return RequestFailedError(
        f"Request failed after {state.attempt} retries: {reason}",
        attempt=state.attempt,
        status_code=status_code,
        body=body,
        headers=response.headers if response is not None else None,
        details={"url": redact_url(url), "attempt": state.attempt},
        cause=error,
    )


def _next_delay(state: BackoffState, error: Exception, url: str) -> float | None:
    status_code, retry_after, reason = _failure_details(error)
    delay = state.policy.delay_for(state.attempt, retry_after)
    if state.exhausted(delay):
        return None
    state.attempt += 1
    logger.info(
        "request_retry",
        url=redact_url(url),
        status_code=status_code,
        reason=reason,
        attempt=state.attempt,
        delay=round(delay, 3),
    )
    return delay


def call_with_backoff(attempt: Callable[[], T], policy: RetryPolicy, *, url: str = "") -> T:
    """Run ``attempt`` until it succeeds or the policy is exhausted.

    ``attempt`` signals a retryable outcome by raising ``RetryableResponse`` or a
    connection-level ``httpx`` error; any other exception propagates immediately.
    """
    state = BackoffState(policy, started_at=time.monotonic())
    while True:
        try:
            return attempt()
        except (RetryableResponse, *RETRYABLE_TRANSPORT_ERRORS) as exc:
            delay = _next_delay(state, exc, url)
            if delay is None:
                raise _exhausted_error(state, exc, url) from exc
        time.sleep(delay)


async def call_with_backoff_async(
    attempt: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    *,
    url: str = "",
) -> T:
    """Async counterpart of ``call_with_backoff``; cancellation stops the loop."""
    state = BackoffState(policy, started_at=time.monotonic())
    while True:
        try:
            return await attempt()
        except (RetryableResponse, *RETRYABLE_TRANSPORT_ERRORS) as exc:
            delay = _next_delay(state, exc, url)
            if delay is None:
                raise _exhausted_error(state, exc, url) from exc
        await asyncio.sleep(delay)
