"""Legacy crawler and execution operations served by the ``/v1`` API.

These endpoints answer with bare entities rather than a ``{"data": ...}``
envelope and report pagination in ``x-apifier-pagination-*`` headers.
"""

from __future__ import annotations

from typing import Any

from ..codec import JSON_CONTENT_TYPE
from ..http_client import RequestDescriptor
from ..models import ApiResponse, ExecutionListOptions, ExecutionResultsOptions, ListOptions, PaginationList
from ..validation import check_param, parse_options
from .base import ResourceGroup

PAGINATION_HEADER_PREFIX = "x-apifier-pagination-"


def _wrap_array(response: ApiResponse) -> PaginationList:
    return PaginationList.from_headers(response.body, response.headers, prefix=PAGINATION_HEADER_PREFIX)


class Crawlers(ResourceGroup):
    base_path = "/v1"

    def _user_url(self, user_id: str | None, *segments: str) -> str:
        user_id = self._default("user_id", user_id)
        check_param(user_id, "user_id", "String")
        return self._url(user_id, "crawlers", *segments)

    def _bare(self, method: str, url: str, **kwargs: Any) -> RequestDescriptor:
        return self._descriptor(method, url, unwrap=False, **kwargs)

    def list_crawlers(self, *, user_id: str | None = None, token: str | None = None, **options: Any) -> Any:
        url = self._user_url(user_id)
        token = self._token(token)
        query = parse_options(ListOptions, options).query_params()
        return self._run(
            self._bare("GET", url, params={"token": token, **query}, resolve_with_response=True),
            _wrap_array,
        )

    def create_crawler(self, *, settings: dict[str, Any], user_id: str | None = None, token: str | None = None) -> Any:
        """Create a crawler; ``settings["customId"]`` is required."""
        url = self._user_url(user_id)
        token = self._token(token)
        check_param(settings, "settings", "Object")
        check_param(settings.get("customId"), "settings.customId", "String")
        return self._run(
            self._bare("POST", url, params={"token": token}, body=settings, content_type=JSON_CONTENT_TYPE)
        )

    def update_crawler(
        self,
        *,
        crawler_id: str,
        settings: dict[str, Any],
        user_id: str | None = None,
        token: str | None = None,
    ) -> Any:
        check_param(crawler_id, "crawler_id", "String")
        url = self._user_url(user_id, crawler_id)
        token = self._token(token)
        check_param(settings, "settings", "Object")
        return self._run(
            self._bare("PUT", url, params={"token": token}, body=settings, content_type=JSON_CONTENT_TYPE)
        )

    def get_crawler_settings(
        self,
        *,
        crawler_id: str,
        nosecrets: bool | None = None,
        user_id: str | None = None,
        token: str | None = None,
    ) -> Any:
        check_param(crawler_id, "crawler_id", "String")
        check_param(nosecrets, "nosecrets", "Maybe Boolean")
        url = self._user_url(user_id, crawler_id)
        token = self._token(token)
        params = {"token": token, "nosecrets": 1 if nosecrets else None}
        return self._run(self._bare("GET", url, params=params, not_found_ok=True))

    def delete_crawler(self, *, crawler_id: str, user_id: str | None = None, token: str | None = None) -> Any:
        check_param(crawler_id, "crawler_id", "String")
        url = self._user_url(user_id, crawler_id)
        token = self._token(token)
        return self._run(self._bare("DELETE", url, params={"token": token}, not_found_ok=True))

    def start_execution(
        self,
        *,
        crawler_id: str,
        settings: dict[str, Any] | None = None,
        tag: str | None = None,
        wait: int | None = None,
        user_id: str | None = None,
        token: str | None = None,
    ) -> Any:
        """Start an execution, optionally overriding crawler ``settings`` for it.

        ``wait`` is the number of seconds the server holds the request open for
        the execution to finish.
        """
        check_param(crawler_id, "crawler_id", "String")
        check_param(settings, "settings", "Maybe Object")
        check_param(tag, "tag", "Maybe String")
        check_param(wait, "wait", "Maybe Number")
        url = self._user_url(user_id, crawler_id, "execute")
        token = self._token(token)
        body = settings or None
        return self._run(
            self._bare(
                "POST",
                url,
                params={"token": token, "tag": tag, "wait": wait},
                body=body,
                content_type=JSON_CONTENT_TYPE if body else None,
            )
        )

    def stop_execution(self, *, execution_id: str, token: str | None = None) -> Any:
        check_param(execution_id, "execution_id", "String")
        token = self._token(token)
        return self._run(self._bare("POST", self._url("execs", execution_id, "stop"), params={"token": token}))

    def get_list_of_executions(
        self,
        *,
        crawler_id: str,
        user_id: str | None = None,
        token: str | None = None,
        **options: Any,
    ) -> Any:
        check_param(crawler_id, "crawler_id", "String")
        url = self._user_url(user_id, crawler_id, "execs")
        token = self._token(token)
        query = parse_options(ExecutionListOptions, options).query_params()
        return self._run(
            self._bare("GET", url, params={"token": token, **query}, resolve_with_response=True),
            _wrap_array,
        )

    def get_execution_details(self, *, execution_id: str) -> Any:
        check_param(execution_id, "execution_id", "String")
        return self._run(self._bare("GET", self._url("execs", execution_id), not_found_ok=True))

    def get_last_execution(
        self,
        *,
        crawler_id: str,
        status: str | None = None,
        user_id: str | None = None,
        token: str | None = None,
    ) -> Any:
        check_param(crawler_id, "crawler_id", "String")
        check_param(status, "status", "Maybe String")
        url = self._user_url(user_id, crawler_id, "lastExec")
        token = self._token(token)
        return self._run(self._bare("GET", url, params={"token": token, "status": status}))

    def get_execution_results(self, *, execution_id: str, **options: Any) -> Any:
        """Return a page of execution results in the requested ``format``."""
        check_param(execution_id, "execution_id", "String")
        query = parse_options(ExecutionResultsOptions, options).query_params()
        return self._run(
            self._bare(
                "GET",
                self._url("execs", execution_id, "results"),
                params=query,
                resolve_with_response=True,
            ),
            _wrap_array,
        )

    def get_last_execution_results(
        self,
        *,
        crawler_id: str,
        user_id: str | None = None,
        token: str | None = None,
        **options: Any,
    ) -> Any:
        check_param(crawler_id, "crawler_id", "String")
        url = self._user_url(user_id, crawler_id, "lastExec", "results")
        token = self._token(token)
        query = parse_options(ExecutionResultsOptions, options).query_params()
        return self._run(
            self._bare("GET", url, params={"token": token, **query}, resolve_with_response=True),
            _wrap_array,
        )
