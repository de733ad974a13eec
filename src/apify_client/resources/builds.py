"""Actor build operations across all of a user's actors."""

from __future__ import annotations

from typing import Any

from ..models import ListOptions
from ..validation import check_param, parse_options
from .base import ResourceGroup, safe_id, to_pagination_list


class Builds(ResourceGroup):
    base_path = "/v2/actor-builds"

    def list_builds(self, *, token: str | None = None, **options: Any) -> Any:
        token = self._token(token)
        query = parse_options(ListOptions, options).query_params()
        return self._run(
            self._descriptor("GET", self._url(), params={"token": token, **query}),
            to_pagination_list,
        )

    def get_build(self, *, build_id: str, wait_for_finish: int | None = None, token: str | None = None) -> Any:
        check_param(build_id, "build_id", "String")
        check_param(wait_for_finish, "wait_for_finish", "Maybe Number")
        token = self._token(token, required=False)
        return self._run(
            self._descriptor(
                "GET",
                self._url(safe_id(build_id)),
                params={"token": token, "waitForFinish": wait_for_finish},
                not_found_ok=True,
            )
        )

    def abort_build(self, *, build_id: str, token: str | None = None) -> Any:
        check_param(build_id, "build_id", "String")
        token = self._token(token)
        return self._run(self._descriptor("POST", self._url(safe_id(build_id), "abort"), params={"token": token}))
