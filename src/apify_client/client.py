"""Main synchronous and asynchronous clients for the Apify API."""

from __future__ import annotations

from typing import Any, Mapping

import httpx

from .config import ClientOptions
from .http_client import AsyncHttpClient, HttpClient
from .resources.acts import Acts
from .resources.builds import Builds
from .resources.crawlers import Crawlers
from .resources.datasets import Datasets
from .resources.key_value_stores import KeyValueStores
from .resources.logs import Logs
from .resources.request_queues import RequestQueues
from .resources.schedules import Schedules
from .resources.tasks import Tasks


class _BaseApifyClient:
    """Holds the option snapshot and the resource groups bound to it.

    Every keyword accepted by ``ClientOptions`` may be passed to the constructor;
    ``APIFY_TOKEN``, ``APIFY_API_BASE_URL`` and ``APIFY_ACT_RUN_ID`` fill in
    whatever is not given explicitly.
    """

    http: HttpClient | AsyncHttpClient

    def __init__(self, *, environ: Mapping[str, str] | None = None, **options: Any) -> None:
        self.options = ClientOptions.from_env(environ, **options)
        self.acts = Acts(self)
        self.tasks = Tasks(self)
        self.builds = Builds(self)
        self.datasets = Datasets(self)
        self.key_value_stores = KeyValueStores(self)
        self.request_queues = RequestQueues(self)
        self.crawlers = Crawlers(self)
        self.logs = Logs(self)
        self.schedules = Schedules(self)

    def set_options(self, **changes: Any) -> ClientOptions:
        """Replace the default options used by subsequent calls.

        Calls already dispatched keep the snapshot they were built from.
        """
        self.options = self.options.replace(**changes)
        return self.options

    def get_options(self) -> ClientOptions:
        return self.options


class ApifyClient(_BaseApifyClient):
    """Synchronous client."""

    def __init__(
        self,
        *,
        headers: Mapping[str, str] | None = None,
        follow_redirects: bool = True,
        httpx_client: httpx.Client | None = None,
        environ: Mapping[str, str] | None = None,
        **options: Any,
    ) -> None:
        super().__init__(environ=environ, **options)
        self.http = HttpClient(httpx_client=httpx_client, headers=headers, follow_redirects=follow_redirects)

    def __enter__(self) -> "ApifyClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self.http.close()


class AsyncApifyClient(_BaseApifyClient):
    """Asynchronous client; every resource method returns an awaitable.

    Argument validation still happens when the method is called, before anything
    is awaited.
    """

    def __init__(
        self,
        *,
        headers: Mapping[str, str] | None = None,
        follow_redirects: bool = True,
        httpx_client: httpx.AsyncClient | None = None,
        environ: Mapping[str, str] | None = None,
        **options: Any,
    ) -> None:
        super().__init__(environ=environ, **options)
        self.http = AsyncHttpClient(httpx_client=httpx_client, headers=headers, follow_redirects=follow_redirects)

    async def __aenter__(self) -> "AsyncApifyClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.http.aclose()
