from __future__ import annotations

import base64
import json

import httpx
import pytest
from structlog.testing import capture_logs

from apify_client.client import ApifyClient
from apify_client.exceptions import ConflictingParametersError


def _client(handler) -> ApifyClient:
    return ApifyClient(
        httpx_client=httpx.Client(transport=httpx.MockTransport(handler)),
        environ={},
        token="test-token",
        retry_base_delay=0.0,
    )


def _echo_run(captured: dict[str, httpx.Request]):
    def send_request(request: httpx.Request) -> httpx.Response:
        captured["request"] = request
        return httpx.Response(201, json={"data": {"id": "run-1", "status": "RUNNING"}}, request=request)

    return send_request


def test_run_task_sends_input_as_json() -> None:
    captured: dict[str, httpx.Request] = {}
    client = _client(_echo_run(captured))
    webhooks = [{"eventTypes": ["ACTOR.RUN.SUCCEEDED"], "requestUrl": "https://example.com/hook"}]

    run = client.tasks.run_task(task_id="someone/my-task", input={"foo": "bar"}, memory=256, webhooks=webhooks)

    assert run == {"id": "run-1", "status": "RUNNING"}
    request = captured["request"]
    assert request.url.path == "/v2/actor-tasks/someone~my-task/runs"
    assert request.headers["content-type"] == "application/json"
    assert json.loads(request.content) == {"foo": "bar"}
    assert request.url.params["memory"] == "256"
    assert json.loads(base64.b64decode(request.url.params["webhooks"])) == webhooks


def test_run_task_rejects_body_and_input_together() -> None:
    def send_request(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    client = _client(send_request)

    with pytest.raises(ConflictingParametersError):
        client.tasks.run_task(task_id="task-1", input={"a": 1}, body='{"a": 1}', content_type="application/json")


def test_run_task_legacy_body_logs_deprecation() -> None:
    captured: dict[str, httpx.Request] = {}
    client = _client(_echo_run(captured))

    with capture_logs() as logs:
        client.tasks.run_task(task_id="task-1", body="<xml/>", content_type="application/xml")

    assert captured["request"].content == b"<xml/>"
    assert captured["request"].headers["content-type"] == "application/xml"
    deprecations = [entry for entry in logs if entry["event"] == "deprecated_parameter"]
    assert len(deprecations) == 1
    assert deprecations[0]["log_level"] == "warning"
    assert deprecations[0]["parameter"] == "body"


def test_run_task_without_overrides_sends_no_body() -> None:
    captured: dict[str, httpx.Request] = {}
    client = _client(_echo_run(captured))

    client.tasks.run_task(task_id="task-1", wait_for_finish=60)

    request = captured["request"]
    assert request.content == b""
    assert "content-type" not in request.headers
    assert request.url.params["waitForFinish"] == "60"


def test_update_task_moves_id_into_path() -> None:
    captured: dict[str, httpx.Request] = {}

    def send_request(request: httpx.Request) -> httpx.Response:
        captured["request"] = request
        return httpx.Response(200, json={"data": {"id": "task-1", "name": "renamed"}}, request=request)

    client = _client(send_request)

    client.tasks.update_task(task={"id": "task-1", "name": "renamed"})

    request = captured["request"]
    assert request.method == "PUT"
    assert request.url.path == "/v2/actor-tasks/task-1"
    assert json.loads(request.content) == {"name": "renamed"}


def test_get_input_is_not_unwrapped() -> None:
    def send_request(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"data": "user supplied"}, request=request)

    client = _client(send_request)

    assert client.tasks.get_input(task_id="task-1") == {"data": "user supplied"}
