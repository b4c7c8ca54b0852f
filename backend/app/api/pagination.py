"""
Pagination and response-envelope helpers shared by every list endpoint.

Page and limit are coerced, never rejected: anything below 1 falls back
to the first page / default size, and the limit is capped.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from pydantic import BaseModel

from app.core.config import settings


@dataclass(frozen=True)
class PaginationSpec:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def normalize_pagination(page: int | None, limit: int | None) -> PaginationSpec:
    """Coerce page/limit into positive integers within the configured bounds."""
    resolved_page = page if page and page > 0 else 1
    resolved_limit = limit if limit and limit > 0 else settings.DEFAULT_PAGE_SIZE
    return PaginationSpec(page=resolved_page, limit=min(resolved_limit, settings.MAX_PAGE_SIZE))


def compute_total_pages(*, total: int, limit: int) -> int:
    """Number of pages needed for `total` rows."""
    if total <= 0:
        return 0
    return ((total - 1) // limit) + 1


def pagination_meta(spec: PaginationSpec, total: int) -> dict[str, int]:
    return {
        "page": spec.page,
        "limit": spec.limit,
        "total": total,
        "pages": compute_total_pages(total=total, limit=spec.limit),
    }


def serialize(schema: type[BaseModel], value: Any) -> Any:
    """Validate ORM rows (or a list of them) into plain JSON-ready dicts."""
    if isinstance(value, (list, tuple)):
        return [schema.model_validate(item).model_dump(mode="json") for item in value]
    return schema.model_validate(value).model_dump(mode="json")


def ok(data: Any = None, *, message: str | None = None, pagination: dict[str, int] | None = None) -> dict[str, Any]:
    """Success envelope."""
    body: dict[str, Any] = {"success": True}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = data
    if pagination is not None:
        body["pagination"] = pagination
    return body


def paginated(schema: type[BaseModel], items: Iterable[Any], total: int, spec: PaginationSpec) -> dict[str, Any]:
    return ok(serialize(schema, list(items)), pagination=pagination_meta(spec, total))
