"""Schedule operations."""

from __future__ import annotations

from typing import Any

from ..codec import JSON_CONTENT_TYPE
from ..models import ListOptions
from ..validation import check_param, parse_options
from .base import ResourceGroup, safe_id, to_pagination_list


class Schedules(ResourceGroup):
    base_path = "/v2/schedules"

    def list_schedules(self, *, token: str | None = None, **options: Any) -> Any:
        token = self._token(token)
        query = parse_options(ListOptions, options).query_params()
        return self._run(
            self._descriptor("GET", self._url(), params={"token": token, **query}),
            to_pagination_list,
        )

    def create_schedule(self, *, schedule: dict[str, Any], token: str | None = None) -> Any:
        token = self._token(token)
        check_param(schedule, "schedule", "Object")
        return self._run(
            self._descriptor("POST", self._url(), params={"token": token}, body=schedule, content_type=JSON_CONTENT_TYPE)
        )

    def get_schedule(self, *, schedule_id: str, token: str | None = None) -> Any:
        check_param(schedule_id, "schedule_id", "String")
        token = self._token(token)
        return self._run(
            self._descriptor("GET", self._url(safe_id(schedule_id)), params={"token": token}, not_found_ok=True)
        )

    def update_schedule(
        self,
        *,
        schedule: dict[str, Any],
        schedule_id: str | None = None,
        token: str | None = None,
    ) -> Any:
        check_param(schedule, "schedule", "Object")
        schedule_id = schedule_id or schedule.get("id")
        check_param(schedule_id, "schedule_id", "String")
        token = self._token(token)
        body = {key: value for key, value in schedule.items() if key != "id"}
        return self._run(
            self._descriptor(
                "PUT",
                self._url(safe_id(schedule_id)),
                params={"token": token},
                body=body,
                content_type=JSON_CONTENT_TYPE,
            )
        )

    def delete_schedule(self, *, schedule_id: str, token: str | None = None) -> Any:
        check_param(schedule_id, "schedule_id", "String")
        token = self._token(token)
        return self._run(
            self._descriptor("DELETE", self._url(safe_id(schedule_id)), params={"token": token}, not_found_ok=True),
            lambda _: None,
        )
