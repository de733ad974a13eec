"""Direct-to-storage transfers for payloads too large for the API server."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping

import structlog

from .exceptions import InvalidResponseError
from .security import redact_url

if TYPE_CHECKING:
    from .http_client import AsyncHttpClient, HttpClient, RequestDescriptor


logger = structlog.get_logger()

SIGNED_URL_UPLOAD_MIN_BYTESIZE = 1024 * 256

# Metadata returned by the negotiation call that does not describe the stored body.
_NEGOTIATION_ONLY_FIELDS = frozenset({"signedUrl", "contentEncoding"})


def should_offload(content: bytes) -> bool:
    return len(content) >= SIGNED_URL_UPLOAD_MIN_BYTESIZE


def _upload_negotiation(descriptor: "RequestDescriptor") -> "RequestDescriptor":
    headers = {"Content-Type": descriptor.content_type} if descriptor.content_type else None
    return descriptor.replace(
        method="GET",
        url=descriptor.upload_url_endpoint,
        headers=headers,
        body=None,
        gzip=False,
        raw_body=False,
        unwrap=True,
        parse_dates=False,
        resolve_with_response=False,
        not_found_ok=False,
        upload_url_endpoint=None,
    )


def _download_negotiation(descriptor: "RequestDescriptor") -> "RequestDescriptor":
    return descriptor.replace(
        method="GET",
        url=descriptor.download_url_endpoint,
        headers=None,
        body=None,
        raw_body=False,
        unwrap=True,
        parse_dates=False,
        resolve_with_response=False,
        download_url_endpoint=None,
    )


def _signed_url(result: Any, url: str) -> str:
    if not isinstance(result, Mapping) or not isinstance(result.get("signedUrl"), str):
        raise InvalidResponseError(
            "Signed URL negotiation did not return a signedUrl",
            body=result,
            details={"url": redact_url(url)},
        )
    return result["signedUrl"]


def _record_with_body(meta: Mapping[str, Any], body: bytes) -> dict[str, Any]:
    record = {key: value for key, value in meta.items() if key not in _NEGOTIATION_ONLY_FIELDS}
    record["body"] = body
    return record


def upload(
    http: "HttpClient",
    descriptor: "RequestDescriptor",
    content: bytes,
    headers: Mapping[str, str],
) -> Any:
    """Negotiate a signed upload URL and send ``content`` straight to it."""
    negotiation = _upload_negotiation(descriptor)
    target = _signed_url(http.call(negotiation), negotiation.url)
    logger.info("signed_url_upload", url=redact_url(descriptor.url), bytes=len(content))
    response = http.send(descriptor, content, url=target, headers=headers)
    return http.finish(descriptor.replace(not_found_ok=False), response)


async def upload_async(
    http: "AsyncHttpClient",
    descriptor: "RequestDescriptor",
    content: bytes,
    headers: Mapping[str, str],
) -> Any:
    negotiation = _upload_negotiation(descriptor)
    target = _signed_url(await http.call(negotiation), negotiation.url)
    logger.info("signed_url_upload", url=redact_url(descriptor.url), bytes=len(content))
    response = await http.send(descriptor, content, url=target, headers=headers)
    return http.finish(descriptor.replace(not_found_ok=False), response)


def download(http: "HttpClient", descriptor: "RequestDescriptor") -> dict[str, Any] | None:
    """Fetch a stored body through a signed download URL.

    Returns the negotiated metadata with the raw ``body`` attached, or ``None``
    when the resource does not exist.
    """
    negotiation = _download_negotiation(descriptor)
    meta = http.call(negotiation)
    if meta is None:
        return None
    target = _signed_url(meta, negotiation.url)
    logger.info("signed_url_download", url=redact_url(descriptor.url))
    response = http.send(descriptor, None, url=target, headers={"Accept": "*/*"})
    body = http.finish(descriptor.replace(raw_body=True, resolve_with_response=False), response)
    if body is None:
        return None
    return _record_with_body(meta, body)


async def download_async(http: "AsyncHttpClient", descriptor: "RequestDescriptor") -> dict[str, Any] | None:
    negotiation = _download_negotiation(descriptor)
    meta = await http.call(negotiation)
    if meta is None:
        return None
    target = _signed_url(meta, negotiation.url)
    logger.info("signed_url_download", url=redact_url(descriptor.url))
    response = await http.send(descriptor, None, url=target, headers={"Accept": "*/*"})
    body = http.finish(descriptor.replace(raw_body=True, resolve_with_response=False), response)
    if body is None:
        return None
    return _record_with_body(meta, body)
