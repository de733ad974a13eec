"""Key-value store operations."""

from __future__ import annotations

from typing import Any

from ..codec import decode_body, encode_body
from ..models import CollectionListOptions
from ..validation import check_param, parse_options
from .base import ResourceGroup, safe_id, to_pagination_list


class KeyValueStores(ResourceGroup):
    base_path = "/v2/key-value-stores"

    def _store_id(self, store_id: str | None) -> str:
        store_id = self._default("store_id", store_id)
        check_param(store_id, "store_id", "String")
        return safe_id(store_id)

    def get_or_create_store(self, *, store_name: str, token: str | None = None) -> Any:
        """Return the store named ``store_name``, creating it when missing."""
        token = self._token(token)
        check_param(store_name, "store_name", "String")
        return self._run(self._descriptor("POST", self._url(), params={"name": store_name, "token": token}))

    def list_stores(self, *, token: str | None = None, **options: Any) -> Any:
        """List stores, oldest first unless ``desc=True``; named stores only unless ``unnamed=True``."""
        token = self._token(token)
        query = parse_options(CollectionListOptions, options).query_params()
        return self._run(
            self._descriptor("GET", self._url(), params={"token": token, **query}),
            to_pagination_list,
        )

    def get_store(self, *, store_id: str | None = None, token: str | None = None) -> Any:
        store_id = self._store_id(store_id)
        token = self._token(token, required=False)
        return self._run(
            self._descriptor("GET", self._url(store_id), params={"token": token}, not_found_ok=True)
        )

    def update_store(self, *, store: dict[str, Any], store_id: str | None = None, token: str | None = None) -> Any:
        check_param(store, "store", "Object")
        store_id = self._store_id(store_id)
        token = self._token(token)
        return self._run(
            self._descriptor(
                "PUT",
                self._url(store_id),
                params={"token": token},
                body=store,
                content_type="application/json",
            )
        )

    def delete_store(self, *, store_id: str | None = None, token: str | None = None) -> Any:
        store_id = self._store_id(store_id)
        token = self._token(token, required=False)
        return self._run(
            self._descriptor("DELETE", self._url(store_id), params={"token": token}, not_found_ok=True),
            lambda _: None,
        )

    def get_record(
        self,
        *,
        key: str,
        store_id: str | None = None,
        raw: bool | None = None,
        use_raw_body: bool | None = None,
        url: bool | None = None,
        token: str | None = None,
    ) -> Any:
        """Return the record stored under ``key``, or ``None`` if there is none.

        With ``raw`` the stored value itself is returned instead of the
        ``{"key", "body", "contentType"}`` record. ``use_raw_body`` keeps the body
        undecoded, and ``url`` downloads it through a signed URL straight from
        storage.
        """
        store_id = self._store_id(store_id)
        check_param(key, "key", "String")
        check_param(raw, "raw", "Maybe Boolean")
        check_param(use_raw_body, "use_raw_body", "Maybe Boolean")
        check_param(url, "url", "Maybe Boolean")
        token = self._token(token, required=False)

        params: dict[str, Any] = {"token": token}
        if raw:
            params["raw"] = 1
        record_url = self._url(store_id, "records", key)

        if url:
            descriptor = self._descriptor(
                "GET",
                record_url,
                params=params,
                not_found_ok=True,
                download_url_endpoint=f"{record_url}/direct-download-url",
            )

            def from_download(record: dict[str, Any]) -> Any:
                if raw:
                    return record["body"]
                if not use_raw_body:
                    record["body"] = decode_body(record["body"], record.get("contentType"))
                return record

            return self._run(descriptor, from_download)

        if raw:
            return self._run(self._descriptor("GET", record_url, params=params, raw_body=True, not_found_ok=True))

        def from_envelope(record: dict[str, Any]) -> Any:
            if not use_raw_body and isinstance(record.get("body"), (str, bytes)):
                record["body"] = decode_body(record["body"], record.get("contentType"))
            return record

        return self._run(
            self._descriptor("GET", record_url, params=params, parse_dates=False, not_found_ok=True),
            from_envelope,
        )

    def put_record(
        self,
        *,
        key: str,
        body: Any,
        store_id: str | None = None,
        content_type: str = "text/plain",
        use_raw_body: bool | None = None,
        token: str | None = None,
    ) -> Any:
        """Store ``body`` under ``key``.

        The body is gzip-compressed; payloads of 256 KiB or more after compression
        are uploaded through a signed URL instead of the API server.
        """
        store_id = self._store_id(store_id)
        check_param(key, "key", "String")
        check_param(content_type, "content_type", "String")
        check_param(use_raw_body, "use_raw_body", "Maybe Boolean")
        encoded = body if use_raw_body else encode_body(body, content_type)
        check_param(encoded, "body", "Buffer | String")
        token = self._token(token, required=False)

        record_url = self._url(store_id, "records", key)
        return self._run(
            self._descriptor(
                "PUT",
                record_url,
                params={"token": token},
                body=encoded,
                content_type=content_type,
                gzip=True,
                upload_url_endpoint=f"{record_url}/direct-upload-url",
            ),
            lambda _: None,
        )

    def delete_record(self, *, key: str, store_id: str | None = None, token: str | None = None) -> Any:
        store_id = self._store_id(store_id)
        check_param(key, "key", "String")
        token = self._token(token, required=False)
        return self._run(
            self._descriptor(
                "DELETE",
                self._url(store_id, "records", key),
                params={"token": token},
                not_found_ok=True,
            ),
            lambda _: None,
        )

    def list_keys(
        self,
        *,
        store_id: str | None = None,
        exclusive_start_key: str | None = None,
        limit: int | None = None,
        token: str | None = None,
    ) -> Any:
        """List keys, paginated by ``exclusive_start_key`` and ``limit`` (at most 1000)."""
        store_id = self._store_id(store_id)
        check_param(exclusive_start_key, "exclusive_start_key", "Maybe String")
        check_param(limit, "limit", "Maybe Number")
        token = self._token(token, required=False)
        params = {"exclusiveStartKey": exclusive_start_key, "limit": limit, "token": token}
        return self._run(self._descriptor("GET", self._url(store_id, "keys"), params=params))

    def list_records(
        self,
        *,
        store_id: str | None = None,
        exclusive_start_key: str | None = None,
        limit: int | None = None,
        use_raw_body: bool | None = None,
        token: str | None = None,
    ) -> Any:
        store_id = self._store_id(store_id)
        check_param(exclusive_start_key, "exclusive_start_key", "Maybe String")
        check_param(limit, "limit", "Maybe Number")
        check_param(use_raw_body, "use_raw_body", "Maybe Boolean")
        token = self._token(token, required=False)
        params = {"exclusiveStartKey": exclusive_start_key, "limit": limit, "token": token}

        def decode_items(data: Any) -> Any:
            if use_raw_body or not isinstance(data, dict):
                return data
            for item in data.get("items") or []:
                if isinstance(item, dict) and isinstance(item.get("body"), (str, bytes)):
                    item["body"] = decode_body(item["body"], item.get("contentType"))
            return data

        return self._run(
            self._descriptor("GET", self._url(store_id, "records"), params=params, parse_dates=False),
            decode_items,
        )
