"""Instance-level default options for the Apify clients."""

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass
from typing import Any, Mapping

from .exceptions import InvalidParameterTypeError
from .security import validate_base_url


TOKEN_ENV_VAR = "APIFY_TOKEN"
BASE_URL_ENV_VAR = "APIFY_API_BASE_URL"
RUN_ID_ENV_VAR = "APIFY_ACT_RUN_ID"

DEFAULT_MAX_RETRIES = 8
DEFAULT_RETRY_BASE_DELAY = 0.5
DEFAULT_RETRY_MAX_DELAY = 128.0
DEFAULT_TIMEOUT = 360.0


@dataclass(frozen=True)
class ClientOptions:
    protocol: str = "https"
    host: str = "api.apify.com"
    port: int | None = None
    base_path: str = ""
    base_url: str | None = None
    token: str | None = None
    user_id: str | None = None
    store_id: str | None = None
    dataset_id: str | None = None
    queue_id: str | None = None
    max_retries: int = DEFAULT_MAX_RETRIES
    retry_base_delay: float = DEFAULT_RETRY_BASE_DELAY
    retry_max_delay: float = DEFAULT_RETRY_MAX_DELAY
    retry_max_elapsed: float | None = None
    timeout: float = DEFAULT_TIMEOUT
    allow_http: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides: Any) -> "ClientOptions":
        """Build options from environment defaults, then explicit overrides.

        ``APIFY_ACT_RUN_ID`` is set when running inside the platform and seeds the
        default key-value store and request queue of that run.
        """
        env = os.environ if environ is None else environ
        seeded: dict[str, Any] = {}
        if env.get(TOKEN_ENV_VAR):
            seeded["token"] = env[TOKEN_ENV_VAR]
        if env.get(BASE_URL_ENV_VAR):
            seeded["base_url"] = env[BASE_URL_ENV_VAR]
        run_id = env.get(RUN_ID_ENV_VAR)
        if run_id:
            seeded["store_id"] = run_id
            seeded["queue_id"] = run_id
        seeded.update({key: value for key, value in overrides.items() if value is not None})
        return cls().replace(**seeded)

    @property
    def resolved_base_url(self) -> str:
        if self.base_url:
            return self.base_url.rstrip("/")
        port = f":{self.port}" if self.port else ""
        return f"{self.protocol}://{self.host}{port}{self.base_path}".rstrip("/")

    def replace(self, **changes: Any) -> "ClientOptions":
        """Return a new snapshot with ``changes`` applied."""
        known = {field.name for field in dataclasses.fields(self)}
        for key in changes:
            if key not in known:
                raise InvalidParameterTypeError(f'Unknown client option "{key}"', parameter=key)
        updated = dataclasses.replace(self, **changes)
        updated.validate()
        return updated

    def validate(self) -> None:
        for name in ("protocol", "host"):
            if not getattr(self, name) and not self.base_url:
                raise InvalidParameterTypeError(f'"options.{name}" parameter is required', parameter=name)
        if self.max_retries < 0:
            raise InvalidParameterTypeError("max_retries must be non-negative", parameter="max_retries")
        if self.retry_max_elapsed is not None and self.retry_max_elapsed <= 0:
            raise InvalidParameterTypeError(
                "retry_max_elapsed must be greater than 0", parameter="retry_max_elapsed"
            )
        if self.timeout <= 0:
            raise InvalidParameterTypeError("timeout must be greater than 0", parameter="timeout")
        try:
            validate_base_url(self.resolved_base_url, allow_http=self.allow_http)
        except ValueError as exc:
            raise InvalidParameterTypeError(str(exc), parameter="base_url", cause=exc) from exc
