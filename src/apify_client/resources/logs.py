"""Run and build logs."""

from __future__ import annotations

from typing import Any

from ..validation import check_param
from .base import ResourceGroup


class Logs(ResourceGroup):
    base_path = "/v2/logs"

    def get_log(self, *, log_id: str, token: str | None = None) -> Any:
        """Return the log text of a run or build, or ``None`` if it does not exist."""
        check_param(log_id, "log_id", "String")
        token = self._token(token, required=False)
        return self._run(
            self._descriptor(
                "GET",
                self._url(log_id),
                params={"token": token},
                headers={"Accept": "text/plain"},
                raw_body=True,
                not_found_ok=True,
            ),
            lambda body: body.decode("utf-8", errors="replace"),
        )
