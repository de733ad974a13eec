"""Actor task operations."""

from __future__ import annotations

from typing import Any

import structlog

from ..codec import JSON_CONTENT_TYPE, encode_body
from ..exceptions import ConflictingParametersError
from ..models import ListOptions
from ..validation import check_param, parse_options
from .base import ResourceGroup, encode_webhooks, safe_id, to_pagination_list

logger = structlog.get_logger()


class Tasks(ResourceGroup):
    base_path = "/v2/actor-tasks"

    def _task_id(self, task_id: str | None) -> str:
        check_param(task_id, "task_id", "String")
        return safe_id(task_id)

    def list_tasks(self, *, token: str | None = None, **options: Any) -> Any:
        token = self._token(token)
        query = parse_options(ListOptions, options).query_params()
        return self._run(
            self._descriptor("GET", self._url(), params={"token": token, **query}),
            to_pagination_list,
        )

    def create_task(self, *, task: dict[str, Any], token: str | None = None) -> Any:
        token = self._token(token)
        check_param(task, "task", "Object")
        return self._run(
            self._descriptor("POST", self._url(), params={"token": token}, body=task, content_type=JSON_CONTENT_TYPE)
        )

    def update_task(self, *, task: dict[str, Any], task_id: str | None = None, token: str | None = None) -> Any:
        check_param(task, "task", "Object")
        task_id = self._task_id(task_id or task.get("id"))
        token = self._token(token)
        body = {key: value for key, value in task.items() if key != "id"}
        return self._run(
            self._descriptor("PUT", self._url(task_id), params={"token": token}, body=body, content_type=JSON_CONTENT_TYPE)
        )

    def delete_task(self, *, task_id: str, token: str | None = None) -> Any:
        task_id = self._task_id(task_id)
        token = self._token(token)
        return self._run(
            self._descriptor("DELETE", self._url(task_id), params={"token": token}, not_found_ok=True),
            lambda _: None,
        )

    def get_task(self, *, task_id: str, token: str | None = None) -> Any:
        task_id = self._task_id(task_id)
        token = self._token(token, required=False)
        return self._run(self._descriptor("GET", self._url(task_id), params={"token": token}, not_found_ok=True))

    def list_runs(self, *, task_id: str, token: str | None = None, **options: Any) -> Any:
        task_id = self._task_id(task_id)
        token = self._token(token)
        query = parse_options(ListOptions, options).query_params()
        return self._run(
            self._descriptor("GET", self._url(task_id, "runs"), params={"token": token, **query}),
            to_pagination_list,
        )

    def run_task(
        self,
        *,
        task_id: str,
        input: Any = None,
        body: Any = None,
        content_type: str | None = None,
        wait_for_finish: int | None = None,
        timeout: int | None = None,
        memory: int | None = None,
        build: str | None = None,
        webhooks: list[dict[str, Any]] | None = None,
        token: str | None = None,
    ) -> Any:
        """Run the task, optionally overriding fields of its stored input.

        ``input`` is sent as JSON. ``body`` with ``content_type`` is the older way
        of passing the same override and cannot be combined with ``input``.
        """
        task_id = self._task_id(task_id)
        token = self._token(token)
        check_param(wait_for_finish, "wait_for_finish", "Maybe Number")
        check_param(timeout, "timeout", "Maybe Number")
        check_param(memory, "memory", "Maybe Number")
        check_param(build, "build", "Maybe String")
        check_param(webhooks, "webhooks", "Maybe Array")

        if input is not None and body is not None:
            raise ConflictingParametersError(
                "Parameters 'input' and 'body' cannot be used together; use 'input' only.",
                parameter="body",
            )
        if body is not None:
            logger.warning("deprecated_parameter", parameter="body", replacement="input", operation="run_task")
            check_param(content_type, "content_type", "String")
            payload = encode_body(body, content_type)
            check_param(payload, "body", "Buffer | String")
        elif input is not None:
            check_param(input, "input", "Object")
            payload, content_type = input, JSON_CONTENT_TYPE
        else:
            payload, content_type = None, None

        params = {
            "token": token,
            "waitForFinish": wait_for_finish,
            "timeout": timeout,
            "memory": memory,
            "build": build,
            "webhooks": encode_webhooks(webhooks) if webhooks else None,
        }
        return self._run(
            self._descriptor(
                "POST",
                self._url(task_id, "runs"),
                params=params,
                body=payload,
                content_type=content_type,
            )
        )

    def list_webhooks(self, *, task_id: str, token: str | None = None, **options: Any) -> Any:
        task_id = self._task_id(task_id)
        token = self._token(token)
        query = parse_options(ListOptions, options).query_params()
        return self._run(
            self._descriptor("GET", self._url(task_id, "webhooks"), params={"token": token, **query}),
            to_pagination_list,
        )

    def get_input(self, *, task_id: str, token: str | None = None) -> Any:
        task_id = self._task_id(task_id)
        token = self._token(token)
        return self._run(
            self._descriptor("GET", self._url(task_id, "input"), params={"token": token}, unwrap=False, not_found_ok=True)
        )

    def update_input(self, *, task_id: str, input: dict[str, Any], token: str | None = None) -> Any:
        task_id = self._task_id(task_id)
        check_param(input, "input", "Object")
        token = self._token(token)
        return self._run(
            self._descriptor(
                "PUT",
                self._url(task_id, "input"),
                params={"token": token},
                body=input,
                content_type=JSON_CONTENT_TYPE,
                unwrap=False,
            )
        )
