"""Request queue operations.

Queue endpoints are backed by a store that may need time to scale under load, so
they retry more patiently than other resources.
"""

from __future__ import annotations

from typing import Any

from ..models import CollectionListOptions
from ..retry import REQUEST_QUEUE_MAX_RETRIES
from ..validation import check_param, parse_options
from .base import ResourceGroup, safe_id, to_pagination_list


class RequestQueues(ResourceGroup):
    base_path = "/v2/request-queues"
    max_retries = REQUEST_QUEUE_MAX_RETRIES

    def _queue_id(self, queue_id: str | None) -> str:
        queue_id = self._default("queue_id", queue_id)
        check_param(queue_id, "queue_id", "String")
        return safe_id(queue_id)

    def get_or_create_queue(self, *, queue_name: str, token: str | None = None) -> Any:
        token = self._token(token)
        check_param(queue_name, "queue_name", "String")
        return self._run(self._descriptor("POST", self._url(), params={"name": queue_name, "token": token}))

    def list_queues(self, *, token: str | None = None, **options: Any) -> Any:
        token = self._token(token)
        query = parse_options(CollectionListOptions, options).query_params()
        return self._run(
            self._descriptor("GET", self._url(), params={"token": token, **query}),
            to_pagination_list,
        )

    def get_queue(self, *, queue_id: str | None = None, token: str | None = None) -> Any:
        """Return the queue, or ``None`` when it does not exist.

        ``token`` is only needed for ``username~queue-name`` identifiers.
        """
        queue_id = self._queue_id(queue_id)
        token = self._token(token, required=False)
        return self._run(
            self._descriptor("GET", self._url(queue_id), params={"token": token}, not_found_ok=True)
        )

    def delete_queue(self, *, queue_id: str | None = None, token: str | None = None) -> Any:
        queue_id = self._queue_id(queue_id)
        token = self._token(token)
        return self._run(
            self._descriptor("DELETE", self._url(queue_id), params={"token": token}, not_found_ok=True),
            lambda _: None,
        )

    def add_request(
        self,
        *,
        request: dict[str, Any],
        queue_id: str | None = None,
        forefront: bool = False,
        token: str | None = None,
    ) -> Any:
        """Enqueue ``request`` and return the operation info.

        Adding a request whose ``uniqueKey`` is already queued returns the existing
        request's info with ``wasAlreadyPresent`` set.
        """
        queue_id = self._queue_id(queue_id)
        check_param(request, "request", "Object")
        check_param(forefront, "forefront", "Boolean")
        token = self._token(token)
        return self._run(
            self._descriptor(
                "POST",
                self._url(queue_id, "requests"),
                params={"forefront": forefront, "token": token},
                body=request,
                content_type="application/json",
            )
        )

    def get_request(self, *, request_id: str, queue_id: str | None = None, token: str | None = None) -> Any:
        queue_id = self._queue_id(queue_id)
        check_param(request_id, "request_id", "String")
        token = self._token(token, required=False)
        return self._run(
            self._descriptor(
                "GET",
                self._url(queue_id, "requests", request_id),
                params={"token": token},
                not_found_ok=True,
            )
        )

    def delete_request(self, *, request_id: str, queue_id: str | None = None, token: str | None = None) -> Any:
        queue_id = self._queue_id(queue_id)
        check_param(request_id, "request_id", "String")
        token = self._token(token)
        return self._run(
            self._descriptor(
                "DELETE",
                self._url(queue_id, "requests", request_id),
                params={"token": token},
                not_found_ok=True,
            ),
            lambda _: None,
        )

    def update_request(
        self,
        *,
        request: dict[str, Any],
        queue_id: str | None = None,
        request_id: str | None = None,
        forefront: bool = False,
        token: str | None = None,
    ) -> Any:
        """Replace a queued request; ``request_id`` defaults to ``request["id"]``."""
        check_param(request, "request", "Object")
        queue_id = self._queue_id(queue_id)
        request_id = request_id or request.get("id")
        check_param(request_id, "request_id", "String")
        check_param(forefront, "forefront", "Boolean")
        token = self._token(token)
        return self._run(
            self._descriptor(
                "PUT",
                self._url(queue_id, "requests", request_id),
                params={"forefront": forefront, "token": token},
                body=request,
                content_type="application/json",
            )
        )

    def get_head(self, *, limit: int, queue_id: str | None = None, token: str | None = None) -> Any:
        """Return up to ``limit`` unhandled requests from the head of the queue."""
        queue_id = self._queue_id(queue_id)
        check_param(limit, "limit", "Number")
        token = self._token(token, required=False)
        return self._run(
            self._descriptor("GET", self._url(queue_id, "head"), params={"limit": limit, "token": token})
        )
