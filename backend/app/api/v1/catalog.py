"""
Shared route set for catalog resources (services, plans, products, episodes).

Each resource module creates its own router, declares its resource-specific
routes first (so literal paths like `/featured` win over `/{key}`), then
calls `register_catalog_routes` to add the common surface:

    GET    ""                   list (filters, status, includeInactive, page, limit)
    GET    /{key}               point lookup
    POST   ""                   create                      (editors)
    PUT    /{key}               partial update              (editors)
    PATCH  /{key}/status        status change               (editors)
    PATCH  /{key}/featured      featured toggle             (editors, if supported)
    POST   /reorder             batch display_order update  (editors)
    DELETE /{key}               soft delete                 (editors)
    DELETE /{key}/permanent     hard delete                 (admins)
"""

from dataclasses import dataclass, field
from typing import Any, Callable

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, get_optional_user, require_roles
from app.api.pagination import normalize_pagination, ok, paginated, serialize
from app.api.schemas.catalog import FeaturedRequest, StatusRequest
from app.core.constants import ADMINS, EDITORS
from app.core.errors import NotFoundError
from app.core.logging import get_logger
from app.db.models.user import User
from app.repositories.base import CatalogRepository

logger = get_logger("api.catalog")


def no_filters() -> dict[str, Any]:
    return {}


@dataclass(frozen=True)
class CatalogResource:
    """Everything the shared routes need to know about one catalog table."""

    repository: CatalogRepository
    label: str
    create_schema: type[BaseModel]
    update_schema: type[BaseModel]
    response_schema: type[BaseModel]
    reorder_schema: type[BaseModel]
    filters: Callable[..., dict[str, Any]] = no_filters
    soft_delete_roles: frozenset = field(default=EDITORS)


def is_editor(user: User | None) -> bool:
    return user is not None and user.role in EDITORS


def register_catalog_routes(router: APIRouter, resource: CatalogResource) -> None:
    """Attach the common CRUD surface for `resource` to `router`."""
    repository = resource.repository
    key_field = repository.key_field
    create_schema = resource.create_schema
    update_schema = resource.update_schema
    reorder_schema = resource.reorder_schema
    response_schema = resource.response_schema

    @router.get("")
    async def list_records(
        filters: dict = Depends(resource.filters),
        status_filter: str | None = Query(None, alias="status"),
        include_inactive: bool = Query(False, alias="includeInactive"),
        page: int = Query(1),
        limit: int = Query(20),
        db: AsyncSession = Depends(get_db),
        user: User | None = Depends(get_optional_user),
    ) -> dict[str, object]:
        """Paginated list; hidden statuses are only listed for editors."""
        spec = normalize_pagination(page, limit)
        editor = is_editor(user)
        result = await repository.list(
            db,
            filters=filters,
            status=status_filter if editor else None,
            include_inactive=include_inactive and editor,
            offset=spec.offset,
            limit=spec.limit,
        )
        return paginated(response_schema, result.items, result.total, spec)

    @router.post("/reorder")
    async def reorder_records(
        payload: reorder_schema,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(require_roles(EDITORS)),
    ) -> dict[str, object]:
        """Apply a batch of display orders atomically."""
        pairs = [(getattr(item, key_field), item.order) for item in payload.order]
        count = await repository.reorder(db, pairs)
        return ok({"updated": count}, message=f"{resource.label} order updated")

    @router.get("/{key}")
    async def get_record(
        key: str,
        include_inactive: bool = Query(False, alias="includeInactive"),
        db: AsyncSession = Depends(get_db),
        user: User | None = Depends(get_optional_user),
    ) -> dict[str, object]:
        record = await repository.get_by_key(
            db, key, include_hidden=include_inactive and is_editor(user)
        )
        if record is None:
            raise NotFoundError(f"{resource.label} not found")
        return ok(serialize(response_schema, record))

    @router.post("", status_code=status.HTTP_201_CREATED)
    async def create_record(
        payload: create_schema,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(require_roles(EDITORS)),
    ) -> dict[str, object]:
        record = await repository.create(db, payload.model_dump(), user_id=current_user.id)
        return ok(serialize(response_schema, record), message=f"{resource.label} created")

    @router.put("/{key}")
    async def update_record(
        key: str,
        payload: update_schema,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(require_roles(EDITORS)),
    ) -> dict[str, object]:
        record = await repository.update(db, key, payload.model_dump(exclude_unset=True))
        return ok(serialize(response_schema, record), message=f"{resource.label} updated")

    @router.patch("/{key}/status")
    async def change_record_status(
        key: str,
        payload: StatusRequest,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(require_roles(EDITORS)),
    ) -> dict[str, object]:
        record = await repository.change_status(db, key, payload.status)
        return ok(serialize(response_schema, record), message=f"{resource.label} status updated")

    if repository.featured_field is not None:

        @router.patch("/{key}/featured")
        async def set_record_featured(
            key: str,
            payload: FeaturedRequest,
            db: AsyncSession = Depends(get_db),
            current_user: User = Depends(require_roles(EDITORS)),
        ) -> dict[str, object]:
            record = await repository.set_featured(db, key, payload.featured)
            return ok(serialize(response_schema, record), message=f"{resource.label} featured flag updated")

    @router.delete("/{key}/permanent")
    async def hard_delete_record(
        key: str,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(require_roles(ADMINS)),
    ) -> dict[str, object]:
        await repository.hard_delete(db, key)
        logger.warning("Catalog record purged", resource=resource.label, key=key, by=str(current_user.id))
        return ok(message=f"{resource.label} permanently deleted")

    @router.delete("/{key}")
    async def soft_delete_record(
        key: str,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(require_roles(resource.soft_delete_roles)),
    ) -> dict[str, object]:
        record = await repository.soft_delete(db, key)
        return ok(serialize(response_schema, record), message=f"{resource.label} deleted")
