"""Dataset operations."""

from __future__ import annotations

from typing import Any

from ..codec import JSON_CONTENT_TYPE_UTF8, decode_body
from ..models import ApiResponse, CollectionListOptions, ExportItemsOptions, ListItemsOptions, PaginationList
from ..validation import check_param, parse_options
from .base import ResourceGroup, safe_id, to_pagination_list


def _pagination_from_response(response: ApiResponse) -> PaginationList:
    return PaginationList.from_headers(response.body, response.headers)


class Datasets(ResourceGroup):
    base_path = "/v2/datasets"

    def _dataset_id(self, dataset_id: str | None) -> str:
        dataset_id = self._default("dataset_id", dataset_id)
        check_param(dataset_id, "dataset_id", "String")
        return safe_id(dataset_id)

    def get_or_create_dataset(self, *, dataset_name: str, token: str | None = None) -> Any:
        token = self._token(token)
        check_param(dataset_name, "dataset_name", "String")
        return self._run(self._descriptor("POST", self._url(), params={"name": dataset_name, "token": token}))

    def list_datasets(self, *, token: str | None = None, **options: Any) -> Any:
        token = self._token(token)
        query = parse_options(CollectionListOptions, options).query_params()
        return self._run(
            self._descriptor("GET", self._url(), params={"token": token, **query}),
            to_pagination_list,
        )

    def get_dataset(self, *, dataset_id: str | None = None, token: str | None = None) -> Any:
        dataset_id = self._dataset_id(dataset_id)
        token = self._token(token, required=False)
        return self._run(
            self._descriptor("GET", self._url(dataset_id), params={"token": token}, not_found_ok=True)
        )

    def update_dataset(self, *, dataset: dict[str, Any], dataset_id: str | None = None, token: str | None = None) -> Any:
        check_param(dataset, "dataset", "Object")
        dataset_id = self._dataset_id(dataset_id)
        token = self._token(token, required=False)
        return self._run(
            self._descriptor(
                "PUT",
                self._url(dataset_id),
                params={"token": token},
                body=dataset,
                content_type="application/json",
            )
        )

    def delete_dataset(self, *, dataset_id: str | None = None, token: str | None = None) -> Any:
        dataset_id = self._dataset_id(dataset_id)
        token = self._token(token, required=False)
        return self._run(
            self._descriptor("DELETE", self._url(dataset_id), params={"token": token}, not_found_ok=True),
            lambda _: None,
        )

    def list_items(self, *, dataset_id: str | None = None, token: str | None = None, **options: Any) -> Any:
        """Return a ``PaginationList`` of dataset items.

        Accepts ``offset``, ``limit``, ``desc``, ``clean``, ``fields``, ``omit``,
        ``skip_empty``, ``skip_hidden`` and ``unwind``; anything else is rejected.
        """
        dataset_id = self._dataset_id(dataset_id)
        token = self._token(token, required=False)
        query = parse_options(ListItemsOptions, options).query_params()
        return self._run(
            self._descriptor(
                "GET",
                self._url(dataset_id, "items"),
                params={"token": token, **query},
                parse_dates=False,
                resolve_with_response=True,
                not_found_ok=True,
            ),
            _pagination_from_response,
        )

    def get_items(self, *, dataset_id: str | None = None, token: str | None = None, **options: Any) -> Any:
        """Export dataset items in the requested ``format``.

        JSON exports are parsed into Python objects and text formats decoded to
        ``str``; with ``disable_body_parser`` the raw bytes are returned.
        """
        dataset_id = self._dataset_id(dataset_id)
        token = self._token(token, required=False)
        parsed = parse_options(ExportItemsOptions, options)

        def parse_body(response: ApiResponse) -> Any:
            if parsed.disable_body_parser:
                return response.body
            return decode_body(response.body, response.headers.get("content-type"))

        return self._run(
            self._descriptor(
                "GET",
                self._url(dataset_id, "items"),
                params={"token": token, **parsed.query_params()},
                headers={"Accept": "*/*"},
                raw_body=True,
                resolve_with_response=True,
                not_found_ok=True,
            ),
            parse_body,
        )

    def put_items(self, *, data: Any, dataset_id: str | None = None, token: str | None = None) -> Any:
        """Append an item, a list of items, or a pre-serialized JSON string to the dataset.

        The payload is gzip-compressed; batches of 256 KiB or more after
        compression go through a signed upload URL.
        """
        dataset_id = self._dataset_id(dataset_id)
        check_param(data, "data", "Object | Array | String")
        token = self._token(token, required=False)
        items_url = self._url(dataset_id, "items")
        return self._run(
            self._descriptor(
                "POST",
                items_url,
                params={"token": token},
                body=data,
                content_type=JSON_CONTENT_TYPE_UTF8,
                gzip=True,
                upload_url_endpoint=f"{items_url}/direct-upload-url",
            ),
            lambda _: None,
        )

    push_items = put_items
