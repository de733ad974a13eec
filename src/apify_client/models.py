"""Response shapes and per-operation option models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApifyModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class PaginationList(ApifyModel):
    """A page of entities returned by list endpoints.

    ``count`` is always the length of ``items``; count values reported by the
    server are ignored because they are wrong when hidden or empty items are
    skipped.
    """

    items: list[Any] = Field(default_factory=list)
    total: int = 0
    offset: int = 0
    count: int = 0
    limit: int | None = None

    @classmethod
    def from_data(cls, data: Mapping[str, Any] | None) -> "PaginationList":
        data = dict(data or {})
        items = list(data.get("items") or [])
        return cls(
            items=items,
            total=_to_int(data.get("total"), default=len(items)),
            offset=_to_int(data.get("offset"), default=0),
            count=len(items),
            limit=_to_int(data.get("limit"), default=None),
        )

    @classmethod
    def from_headers(
        cls,
        items: Any,
        headers: Mapping[str, str],
        *,
        prefix: str = "x-apify-pagination-",
    ) -> "PaginationList":
        if items is None:
            items = []
        elif not isinstance(items, list):
            items = [items]
        return cls(
            items=items,
            total=_to_int(headers.get(f"{prefix}total"), default=len(items)),
            offset=_to_int(headers.get(f"{prefix}offset"), default=0),
            count=len(items),
            limit=_to_int(headers.get(f"{prefix}limit"), default=None),
        )


def _to_int(value: Any, *, default: int | None) -> int | None:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class ApiResponse:
    """Decoded response returned when a call asks for the full response."""

    status_code: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Any = None


class OperationOptions(BaseModel):
    """Exact-shape option bag; unknown keys and loose types are rejected."""

    model_config = ConfigDict(
        extra="forbid",
        strict=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    # Boolean parameters whose explicit ``False`` must reach the API as ``0``.
    keep_false: ClassVar[frozenset[str]] = frozenset()
    # Fields consumed by the client itself and never sent as query parameters.
    local_fields: ClassVar[frozenset[str]] = frozenset()

    def query_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {}
        for name, value in self.model_dump(exclude_none=True).items():
            if name in self.local_fields:
                continue
            key = type(self).model_fields[name].alias or name
            if isinstance(value, bool):
                if value:
                    params[key] = 1
                elif name in self.keep_false:
                    params[key] = 0
                continue
            if isinstance(value, list):
                params[key] = ",".join(str(item) for item in value)
                continue
            params[key] = value
        return params


class ListOptions(OperationOptions):
    offset: int | None = None
    limit: int | None = None
    desc: bool | None = None


class CollectionListOptions(ListOptions):
    unnamed: bool | None = None


class ListItemsOptions(ListOptions):
    clean: bool | None = None
    fields: list[str] | None = None
    omit: list[str] | None = None
    skip_empty: bool | None = None
    skip_hidden: bool | None = None
    unwind: str | None = None


class ExportItemsOptions(ListItemsOptions):
    keep_false: ClassVar[frozenset[str]] = frozenset({"bom"})
    local_fields: ClassVar[frozenset[str]] = frozenset({"disable_body_parser"})

    format: Literal["json", "jsonl", "csv", "xlsx", "html", "xml", "rss"] | None = None
    attachment: bool | None = None
    delimiter: str | None = None
    bom: bool | None = None
    xml_root: str | None = None
    xml_row: str | None = None
    simplified: bool | None = None
    disable_body_parser: bool | None = None


class ExecutionListOptions(ListOptions):
    status: str | None = None


class ExecutionResultsOptions(ListOptions):
    keep_false: ClassVar[frozenset[str]] = frozenset({"bom"})

    status: str | None = None
    format: Literal["json", "jsonl", "csv", "xlsx", "html", "xml", "rss"] | None = None
    simplified: bool | None = None
    attachment: bool | None = None
    delimiter: str | None = None
    bom: bool | None = None
