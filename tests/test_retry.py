from __future__ import annotations

import asyncio

import httpx
import pytest

from apify_client.client import ApifyClient, AsyncApifyClient
from apify_client.exceptions import ApifyApiError, InvalidParameterTypeError, RequestFailedError
from apify_client.retry import RetryPolicy


def _client(handler, **options) -> ApifyClient:
    options.setdefault("token", "test-token")
    options.setdefault("retry_base_delay", 0.0)
    return ApifyClient(
        httpx_client=httpx.Client(transport=httpx.MockTransport(handler)),
        environ={},
        **options,
    )


def test_delay_grows_exponentially_and_is_capped() -> None:
    policy = RetryPolicy(base_delay=1.0, max_delay=10.0, jitter_ratio=0.0)

    assert [policy.delay_for(attempt) for attempt in range(5)] == [1.0, 2.0, 4.0, 8.0, 10.0]


def test_retry_after_is_honoured_up_to_a_minute() -> None:
    policy = RetryPolicy(base_delay=0.5, jitter_ratio=0.0)

    assert policy.delay_for(0, retry_after=30.0) == 30.0
    assert policy.delay_for(0, retry_after=600.0) == 60.0


def test_failure_after_retry_ceiling_reports_attempts() -> None:
    calls: list[httpx.Request] = []

    def send_request(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(500, json={"error": {"message": "internal"}}, request=request)

    client = _client(send_request, max_retries=3)

    with pytest.raises(RequestFailedError) as exc_info:
        client.acts.get_act(act_id="my-act")

    assert exc_info.value.attempt == 3
    assert exc_info.value.status_code == 500
    assert len(calls) == 4
    assert "test-token" not in exc_info.value.details["url"]


def test_zero_retries_makes_a_single_attempt() -> None:
    calls: list[httpx.Request] = []

    def send_request(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(503, request=request)

    client = _client(send_request, max_retries=0)

    with pytest.raises(RequestFailedError) as exc_info:
        client.acts.get_act(act_id="my-act")

    assert exc_info.value.attempt == 0
    assert len(calls) == 1


def test_transient_errors_are_retried_until_success() -> None:
    statuses = iter([503, 429, 200])

    def send_request(request: httpx.Request) -> httpx.Response:
        status = next(statuses)
        if status == 200:
            return httpx.Response(200, json={"data": {"id": "act-1"}}, request=request)
        return httpx.Response(status, request=request)

    client = _client(send_request)

    assert client.acts.get_act(act_id="act-1") == {"id": "act-1"}


def test_connection_errors_are_retried() -> None:
    calls: list[httpx.Request] = []

    def send_request(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if len(calls) < 3:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, json={"data": {"id": "act-1"}}, request=request)

    client = _client(send_request)

    assert client.acts.get_act(act_id="act-1") == {"id": "act-1"}
    assert len(calls) == 3


def test_client_errors_are_not_retried() -> None:
    calls: list[httpx.Request] = []

    def send_request(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(
            400,
            json={"error": {"type": "invalid-input", "message": "Input is not valid"}},
            request=request,
        )

    client = _client(send_request)

    with pytest.raises(ApifyApiError) as exc_info:
        client.acts.run_act(act_id="act-1", body={"a": 1}, content_type="application/json")

    assert not isinstance(exc_info.value, RequestFailedError)
    assert exc_info.value.status_code == 400
    assert exc_info.value.error_type == "invalid-input"
    assert exc_info.value.message == "Input is not valid"
    assert len(calls) == 1


def test_request_queues_use_a_higher_retry_ceiling() -> None:
    calls: list[httpx.Request] = []

    def send_request(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(502, request=request)

    client = _client(send_request, max_retries=2)

    with pytest.raises(RequestFailedError) as exc_info:
        client.request_queues.get_queue(queue_id="queue-1")

    assert exc_info.value.attempt == 9
    assert len(calls) == 10


def test_backoff_sleeps_between_attempts(monkeypatch) -> None:
    delays: list[float] = []
    monkeypatch.setattr("apify_client.retry.time.sleep", delays.append)
    statuses = iter([500, 500, 200])

    def send_request(request: httpx.Request) -> httpx.Response:
        return httpx.Response(next(statuses), json={"data": {}}, request=request)

    client = _client(send_request, retry_base_delay=0.5)
    client.acts.get_act(act_id="act-1")

    assert len(delays) == 2
    assert 0.5 <= delays[0] <= 0.55
    assert 1.0 <= delays[1] <= 1.1


def test_async_client_retries_transient_errors() -> None:
    statuses = iter([500, 200])

    def send_request(request: httpx.Request) -> httpx.Response:
        return httpx.Response(next(statuses), json={"data": {"id": "act-1"}}, request=request)

    async def run() -> object:
        async with AsyncApifyClient(
            httpx_client=httpx.AsyncClient(transport=httpx.MockTransport(send_request)),
            environ={},
            token="test-token",
            retry_base_delay=0.0,
        ) as client:
            return await client.acts.get_act(act_id="act-1")

    assert asyncio.run(run()) == {"id": "act-1"}


def test_retry_max_elapsed_stops_before_overrunning_the_budget(monkeypatch) -> None:
    clock = [0.0]
    delays: list[float] = []

    def fake_sleep(seconds: float) -> None:
        delays.append(seconds)
        clock[0] += seconds

    monkeypatch.setattr("apify_client.retry.time.monotonic", lambda: clock[0])
    monkeypatch.setattr("apify_client.retry.time.sleep", fake_sleep)
    calls: list[httpx.Request] = []

    def send_request(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(500, request=request)

    client = _client(send_request, max_retries=8, retry_base_delay=1.0, retry_max_elapsed=5.0)

    with pytest.raises(RequestFailedError) as exc_info:
        client.acts.get_act(act_id="my-act")

    assert exc_info.value.attempt == 2
    assert len(calls) == 3
    assert len(delays) == 2
    assert sum(delays) <= 5.0


def test_retry_max_elapsed_must_be_positive() -> None:
    with pytest.raises(InvalidParameterTypeError) as exc_info:
        _client(lambda request: httpx.Response(200, request=request), retry_max_elapsed=0)

    assert exc_info.value.parameter == "retry_max_elapsed"
