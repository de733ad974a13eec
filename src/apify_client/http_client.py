"""Request dispatching shared by every resource."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Mapping

import httpx
import structlog

from . import signed_url
from .codec import (
    encode_body,
    gzip_body,
    gzip_body_async,
    is_json_content_type,
    decode_body,
    parse_date_fields,
    pluck_data,
)
from .exceptions import ApifyApiError, ApifyClientError, InvalidResponseError
from .models import ApiResponse
from .retry import RetryPolicy, RetryableResponse, call_with_backoff, call_with_backoff_async, is_retryable_status
from .security import redact_url


logger = structlog.get_logger()

USER_AGENT = "apify-client-python/0.1.0"


@dataclass(frozen=True)
class RequestDescriptor:
    """Immutable plan for one logical API call."""

    method: str
    url: str
    params: Mapping[str, Any] | None = None
    headers: Mapping[str, str] | None = None
    body: Any = None
    content_type: str | None = None
    gzip: bool = False
    raw_body: bool = False
    unwrap: bool = True
    parse_dates: bool = True
    resolve_with_response: bool = False
    not_found_ok: bool = False
    retry_policy: RetryPolicy = RetryPolicy()
    timeout: float | None = None
    upload_url_endpoint: str | None = None
    download_url_endpoint: str | None = None

    def replace(self, **changes: Any) -> "RequestDescriptor":
        return dataclasses.replace(self, **changes)


def clean_params(params: Mapping[str, Any] | None) -> dict[str, Any] | None:
    if not params:
        return None
    cleaned = {key: value for key, value in params.items() if value is not None}
    return cleaned or None


def raise_for_status(response: httpx.Response) -> None:
    """Map a non-2xx response onto ``ApifyApiError``."""
    if response.is_success:
        return
    raw_body: str | None = None
    parsed_body: Any = None
    try:
        raw_body = response.text
        if is_json_content_type(response.headers.get("content-type")):
            parsed_body = response.json()
    except ValueError:
        parsed_body = None

    message = raw_body or f"Request failed with status {response.status_code}"
    error_type = None
    if isinstance(parsed_body, Mapping):
        error = parsed_body.get("error")
        if isinstance(error, Mapping):
            message = str(error.get("message") or message)
            error_type = error.get("type") if isinstance(error.get("type"), str) else None
        elif isinstance(error, str):
            message = error
        elif isinstance(parsed_body.get("message"), str):
            message = parsed_body["message"]

    raise ApifyApiError(
        message,
        status_code=response.status_code,
        error_type=error_type,
        body=parsed_body if parsed_body is not None else raw_body,
        headers=MappingProxyType(dict(response.headers)),
        details={"method": response.request.method, "url": redact_url(str(response.request.url))},
    )


class _BaseHttpClient:
    """Encoding, decoding and error mapping shared by both dispatchers."""

    def __init__(self, *, headers: Mapping[str, str] | None = None) -> None:
        self._default_headers = {"Accept": "application/json", "User-Agent": USER_AGENT}
        if headers:
            self._default_headers.update({str(key): str(value) for key, value in headers.items()})

    def _headers(self, descriptor: RequestDescriptor, *, compressed: bool) -> dict[str, str]:
        merged = dict(self._default_headers)
        if descriptor.headers:
            merged.update(descriptor.headers)
        if descriptor.content_type and descriptor.body is not None:
            merged["Content-Type"] = descriptor.content_type
        if compressed:
            merged["Content-Encoding"] = "gzip"
        return merged

    @staticmethod
    def _encode(descriptor: RequestDescriptor) -> bytes | None:
        return encode_body(descriptor.body, descriptor.content_type)

    @staticmethod
    def _attempt_result(response: httpx.Response) -> httpx.Response:
        if is_retryable_status(response.status_code):
            raise RetryableResponse(response)
        return response

    @staticmethod
    def _transport_error(descriptor: RequestDescriptor, url: str, exc: httpx.HTTPError) -> ApifyClientError:
        if isinstance(exc, httpx.DecodingError):
            return InvalidResponseError(
                f"Response to {descriptor.method} {redact_url(url)} could not be decoded: {exc}",
                details={"method": descriptor.method, "url": redact_url(url)},
                cause=exc,
            )
        return ApifyClientError(
            f"{descriptor.method} {redact_url(url)} failed: {exc}",
            error_type="transport-error",
            cause=exc,
        )

    def finish(self, descriptor: RequestDescriptor, response: httpx.Response) -> Any:
        """Decode a final response, or raise the mapped error."""
        logger.debug(
            "request_complete",
            method=descriptor.method,
            url=redact_url(str(response.request.url)),
            status_code=response.status_code,
        )
        if response.status_code == 404 and descriptor.not_found_ok:
            return None
        raise_for_status(response)

        content_type = response.headers.get("content-type")
        if descriptor.raw_body:
            body: Any = response.content
        else:
            body = decode_body(response.content, content_type)
            if descriptor.parse_dates and is_json_content_type(content_type):
                body = parse_date_fields(body)

        if descriptor.resolve_with_response:
            return ApiResponse(
                status_code=response.status_code,
                headers=MappingProxyType(dict(response.headers)),
                body=body,
            )
        if descriptor.unwrap and not descriptor.raw_body:
            return pluck_data(body)
        return body


class HttpClient(_BaseHttpClient):
    """Synchronous dispatcher over ``httpx.Client``."""

    def __init__(
        self,
        *,
        httpx_client: httpx.Client | None = None,
        headers: Mapping[str, str] | None = None,
        follow_redirects: bool = True,
    ) -> None:
        super().__init__(headers=headers)
        self._httpx = httpx_client or httpx.Client(follow_redirects=follow_redirects, trust_env=False)

    def close(self) -> None:
        self._httpx.close()

    def send(
        self,
        descriptor: RequestDescriptor,
        content: bytes | None,
        *,
        url: str | None = None,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        """Issue the HTTP request, retrying transient failures."""
        target = url or descriptor.url
        final_headers = dict(headers) if headers is not None else self._headers(descriptor, compressed=descriptor.gzip)
        final_params = clean_params(descriptor.params if url is None else params)

        def attempt() -> httpx.Response:
            response = self._httpx.request(
                descriptor.method,
                target,
                params=final_params,
                headers=final_headers,
                content=content,
                timeout=descriptor.timeout,
            )
            return self._attempt_result(response)

        try:
            return call_with_backoff(attempt, descriptor.retry_policy, url=target)
        except httpx.HTTPError as exc:
            raise self._transport_error(descriptor, target, exc) from exc

    def call(self, descriptor: RequestDescriptor) -> Any:
        if descriptor.download_url_endpoint:
            return signed_url.download(self, descriptor)

        content = self._encode(descriptor)
        if content is not None and descriptor.gzip:
            content = gzip_body(content)
        if content is not None and descriptor.upload_url_endpoint and signed_url.should_offload(content):
            return signed_url.upload(self, descriptor, content, self._headers(descriptor, compressed=descriptor.gzip))

        response = self.send(descriptor, content)
        return self.finish(descriptor, response)

    def run(self, descriptor: RequestDescriptor, transform: Callable[[Any], Any] | None = None) -> Any:
        result = self.call(descriptor)
        if transform is None or result is None:
            return result
        return transform(result)


class AsyncHttpClient(_BaseHttpClient):
    """Asynchronous dispatcher over ``httpx.AsyncClient``."""

    def __init__(
        self,
        *,
        httpx_client: httpx.AsyncClient | None = None,
        headers: Mapping[str, str] | None = None,
        follow_redirects: bool = True,
    ) -> None:
        super().__init__(headers=headers)
        self._httpx = httpx_client or httpx.AsyncClient(follow_redirects=follow_redirects, trust_env=False)

    async def aclose(self) -> None:
        await self._httpx.aclose()

    async def send(
        self,
        descriptor: RequestDescriptor,
        content: bytes | None,
        *,
        url: str | None = None,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        target = url or descriptor.url
        final_headers = dict(headers) if headers is not None else self._headers(descriptor, compressed=descriptor.gzip)
        final_params = clean_params(descriptor.params if url is None else params)

        async def attempt() -> httpx.Response:
            response = await self._httpx.request(
                descriptor.method,
                target,
                params=final_params,
                headers=final_headers,
                content=content,
                timeout=descriptor.timeout,
            )
            return self._attempt_result(response)

        try:
            return await call_with_backoff_async(attempt, descriptor.retry_policy, url=target)
        except httpx.HTTPError as exc:
            raise self._transport_error(descriptor, target, exc) from exc

    async def call(self, descriptor: RequestDescriptor) -> Any:
        if descriptor.download_url_endpoint:
            return await signed_url.download_async(self, descriptor)

        content = self._encode(descriptor)
        if content is not None and descriptor.gzip:
            content = await gzip_body_async(content)
        if content is not None and descriptor.upload_url_endpoint and signed_url.should_offload(content):
            return await signed_url.upload_async(
                self, descriptor, content, self._headers(descriptor, compressed=descriptor.gzip)
            )

        response = await self.send(descriptor, content)
        return self.finish(descriptor, response)

    def run(self, descriptor: RequestDescriptor, transform: Callable[[Any], Any] | None = None) -> Awaitable[Any]:
        async def _run() -> Any:
            result = await self.call(descriptor)
            if transform is None or result is None:
                return result
            return transform(result)

        return _run()
