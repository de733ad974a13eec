"""Actor operations."""

from __future__ import annotations

from typing import Any

from ..codec import encode_body
from ..models import ListOptions
from ..validation import check_param, parse_options
from .base import ResourceGroup, encode_webhooks, safe_id, to_pagination_list


class Acts(ResourceGroup):
    base_path = "/v2/acts"

    def _act_id(self, act_id: str | None) -> str:
        check_param(act_id, "act_id", "String")
        return safe_id(act_id)

    def list_acts(self, *, token: str | None = None, **options: Any) -> Any:
        token = self._token(token)
        query = parse_options(ListOptions, options).query_params()
        return self._run(
            self._descriptor("GET", self._url(), params={"token": token, **query}),
            to_pagination_list,
        )

    def create_act(self, *, act: dict[str, Any], token: str | None = None) -> Any:
        token = self._token(token)
        check_param(act, "act", "Object")
        return self._run(
            self._descriptor("POST", self._url(), params={"token": token}, body=act, content_type="application/json")
        )

    def update_act(self, *, act: dict[str, Any], act_id: str | None = None, token: str | None = None) -> Any:
        """Update an actor; ``act_id`` defaults to ``act["id"]``, which is never sent in the body."""
        check_param(act, "act", "Object")
        act_id = self._act_id(act_id or act.get("id"))
        token = self._token(token)
        body = {key: value for key, value in act.items() if key != "id"}
        return self._run(
            self._descriptor("PUT", self._url(act_id), params={"token": token}, body=body, content_type="application/json")
        )

    def delete_act(self, *, act_id: str, token: str | None = None) -> Any:
        act_id = self._act_id(act_id)
        token = self._token(token, required=False)
        return self._run(
            self._descriptor("DELETE", self._url(act_id), params={"token": token}, not_found_ok=True),
            lambda _: None,
        )

    def get_act(self, *, act_id: str, token: str | None = None) -> Any:
        act_id = self._act_id(act_id)
        token = self._token(token, required=False)
        return self._run(self._descriptor("GET", self._url(act_id), params={"token": token}, not_found_ok=True))

    def list_runs(self, *, act_id: str, token: str | None = None, **options: Any) -> Any:
        act_id = self._act_id(act_id)
        token = self._token(token)
        query = parse_options(ListOptions, options).query_params()
        return self._run(
            self._descriptor("GET", self._url(act_id, "runs"), params={"token": token, **query}),
            to_pagination_list,
        )

    def run_act(
        self,
        *,
        act_id: str,
        body: Any = None,
        content_type: str | None = None,
        use_raw_body: bool | None = None,
        wait_for_finish: int | None = None,
        timeout: int | None = None,
        memory: int | None = None,
        build: str | None = None,
        webhooks: list[dict[str, Any]] | None = None,
        token: str | None = None,
    ) -> Any:
        """Start a run of the actor's latest build with ``body`` as its input."""
        act_id = self._act_id(act_id)
        token = self._token(token)
        check_param(content_type, "content_type", "Maybe String")
        check_param(use_raw_body, "use_raw_body", "Maybe Boolean")
        check_param(wait_for_finish, "wait_for_finish", "Maybe Number")
        check_param(timeout, "timeout", "Maybe Number")
        check_param(memory, "memory", "Maybe Number")
        check_param(build, "build", "Maybe String")
        check_param(webhooks, "webhooks", "Maybe Array")
        encoded = body if use_raw_body else encode_body(body, content_type)
        check_param(encoded, "body", "Maybe Buffer | String")

        params = {
            "token": token,
            "waitForFinish": wait_for_finish,
            "timeout": timeout,
            "memory": memory,
            "build": build,
            "webhooks": encode_webhooks(webhooks) if webhooks else None,
        }
        return self._run(
            self._descriptor(
                "POST",
                self._url(act_id, "runs"),
                params=params,
                body=encoded,
                content_type=content_type,
            )
        )

    def get_run(self, *, act_id: str, run_id: str, token: str | None = None) -> Any:
        act_id = self._act_id(act_id)
        check_param(run_id, "run_id", "String")
        token = self._token(token, required=False)
        return self._run(
            self._descriptor("GET", self._url(act_id, "runs", run_id), params={"token": token}, not_found_ok=True)
        )

    def list_builds(self, *, act_id: str, token: str | None = None, **options: Any) -> Any:
        act_id = self._act_id(act_id)
        token = self._token(token)
        query = parse_options(ListOptions, options).query_params()
        return self._run(
            self._descriptor("GET", self._url(act_id, "builds"), params={"token": token, **query}),
            to_pagination_list,
        )

    def build_act(
        self,
        *,
        act_id: str,
        version: str | None = None,
        use_cache: bool | None = None,
        beta_packages: bool | None = None,
        tag: str | None = None,
        wait_for_finish: int | None = None,
        token: str | None = None,
    ) -> Any:
        act_id = self._act_id(act_id)
        token = self._token(token)
        check_param(version, "version", "Maybe String")
        check_param(use_cache, "use_cache", "Maybe Boolean")
        check_param(beta_packages, "beta_packages", "Maybe Boolean")
        check_param(tag, "tag", "Maybe String")
        check_param(wait_for_finish, "wait_for_finish", "Maybe Number")
        params = {
            "token": token,
            "version": version,
            "useCache": 1 if use_cache else None,
            "betaPackages": 1 if beta_packages else None,
            "tag": tag,
            "waitForFinish": wait_for_finish,
        }
        return self._run(self._descriptor("POST", self._url(act_id, "builds"), params=params))

    def get_build(self, *, act_id: str, build_id: str, token: str | None = None) -> Any:
        act_id = self._act_id(act_id)
        check_param(build_id, "build_id", "String")
        token = self._token(token, required=False)
        return self._run(
            self._descriptor("GET", self._url(act_id, "builds", build_id), params={"token": token}, not_found_ok=True)
        )
