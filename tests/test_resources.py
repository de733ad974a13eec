from __future__ import annotations

import json

import httpx

from apify_client.client import ApifyClient


def _client(handler) -> ApifyClient:
    return ApifyClient(
        httpx_client=httpx.Client(transport=httpx.MockTransport(handler)),
        environ={},
        token="test-token",
    )


def test_get_log_returns_text() -> None:
    captured: dict[str, httpx.Request] = {}

    def send_request(request: httpx.Request) -> httpx.Response:
        captured["request"] = request
        return httpx.Response(
            200,
            content=b"2019-01-01T00:00:00.000Z ACTOR: Starting\n",
            headers={"content-type": "text/plain; charset=utf-8"},
            request=request,
        )

    client = _client(send_request)

    assert client.logs.get_log(log_id="run-1") == "2019-01-01T00:00:00.000Z ACTOR: Starting\n"
    assert captured["request"].url.path == "/v2/logs/run-1"


def test_get_log_returns_none_when_missing() -> None:
    client = _client(lambda request: httpx.Response(404, request=request))

    assert client.logs.get_log(log_id="missing") is None


def test_schedule_lifecycle_requests() -> None:
    requests: list[httpx.Request] = []

    def send_request(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.method == "DELETE":
            return httpx.Response(204, request=request)
        return httpx.Response(200, json={"data": {"id": "sched-1", "cronExpression": "@daily"}}, request=request)

    client = _client(send_request)

    created = client.schedules.create_schedule(schedule={"name": "daily", "cronExpression": "@daily"})
    client.schedules.update_schedule(schedule={"id": "sched-1", "isEnabled": False})
    assert client.schedules.delete_schedule(schedule_id="sched-1") is None

    assert created["id"] == "sched-1"
    assert [(request.method, request.url.path) for request in requests] == [
        ("POST", "/v2/schedules"),
        ("PUT", "/v2/schedules/sched-1"),
        ("DELETE", "/v2/schedules/sched-1"),
    ]
    assert json.loads(requests[1].content) == {"isEnabled": False}


def test_builds_listing_and_abort() -> None:
    requests: list[httpx.Request] = []

    def send_request(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.url.path.endswith("/abort"):
            return httpx.Response(200, json={"data": {"id": "build-1", "status": "ABORTING"}}, request=request)
        data = {"items": [{"id": "build-1"}], "total": 1, "offset": 0, "count": 1, "limit": 1000}
        return httpx.Response(200, json={"data": data}, request=request)

    client = _client(send_request)

    page = client.builds.list_builds(desc=True)
    aborted = client.builds.abort_build(build_id="build-1")

    assert page.items == [{"id": "build-1"}]
    assert aborted["status"] == "ABORTING"
    assert requests[0].url.params["desc"] == "1"
    assert requests[1].url.path == "/v2/actor-builds/build-1/abort"


def test_schedule_and_build_ids_with_username_are_tilde_encoded() -> None:
    requests: list[httpx.Request] = []

    def send_request(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"data": {"id": "x"}}, request=request)

    client = _client(send_request)

    client.schedules.get_schedule(schedule_id="me/nightly")
    client.builds.get_build(build_id="me/build")

    assert [request.url.path for request in requests] == ["/v2/schedules/me~nightly", "/v2/actor-builds/me~build"]
