"""Shared plumbing for resource groups."""

from __future__ import annotations

import base64
from typing import TYPE_CHECKING, Any, Callable, ClassVar, Mapping, Sequence
from urllib.parse import quote

from ..codec import json_dumps, pluck_data
from ..config import ClientOptions
from ..http_client import RequestDescriptor
from ..models import PaginationList
from ..retry import RetryPolicy
from ..validation import check_param

if TYPE_CHECKING:
    from ..client import _BaseApifyClient


def safe_id(resource_id: str) -> str:
    """Encode ``username/resource-name`` identifiers as ``username~resource-name``."""
    return resource_id.replace("/", "~")


def encode_webhooks(webhooks: Sequence[Mapping[str, Any]]) -> str:
    """Serialize ad-hoc webhooks into the base64 JSON the run endpoints expect."""
    return base64.b64encode(json_dumps(list(webhooks)).encode("utf-8")).decode("ascii")


def to_pagination_list(data: Any) -> PaginationList:
    return PaginationList.from_data(pluck_data(data))


class ResourceGroup:
    """Base for façades that turn resource operations into request descriptors.

    Every method validates synchronously and then hands its descriptor to the
    client's dispatcher, so the return value is the result itself on the sync
    client and an awaitable on the async client.
    """

    base_path: ClassVar[str] = ""
    max_retries: ClassVar[int | None] = None

    def __init__(self, client: "_BaseApifyClient") -> None:
        self._client = client

    @property
    def _options(self) -> ClientOptions:
        return self._client.options

    def _url(self, *segments: str) -> str:
        base = f"{self._options.resolved_base_url}{self.base_path}"
        if not segments:
            return base
        return "/".join([base, *(quote(str(segment), safe="~") for segment in segments)])

    def _default(self, name: str, value: Any) -> Any:
        return value if value is not None else getattr(self._options, name)

    def _token(self, token: str | None, *, required: bool = True) -> str | None:
        resolved = self._default("token", token)
        check_param(resolved, "token", "String" if required else "Maybe String")
        return resolved

    def _retry_policy(self) -> RetryPolicy:
        options = self._options
        max_retries = options.max_retries
        if self.max_retries is not None:
            max_retries = max(max_retries, self.max_retries)
        return RetryPolicy(
            max_retries=max_retries,
            base_delay=options.retry_base_delay,
            max_delay=options.retry_max_delay,
            max_elapsed=options.retry_max_elapsed,
        )

    def _descriptor(self, method: str, url: str, **kwargs: Any) -> RequestDescriptor:
        kwargs.setdefault("retry_policy", self._retry_policy())
        kwargs.setdefault("timeout", self._options.timeout)
        return RequestDescriptor(method=method, url=url, **kwargs)

    def _run(self, descriptor: RequestDescriptor, transform: Callable[[Any], Any] | None = None) -> Any:
        return self._client.http.run(descriptor, transform)
