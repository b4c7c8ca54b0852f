"""Pricing plan endpoints."""

from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db
from app.api.pagination import ok, serialize
from app.api.schemas.catalog import PlanCreate, PlanReorderRequest, PlanResponse, PlanUpdate
from app.api.v1.catalog import CatalogResource, register_catalog_routes
from app.core.errors import NotFoundError
from app.repositories import plans as plan_repository

router = APIRouter(prefix="/planes", tags=["Plans"])


def plan_filters(featured: bool | None = None) -> dict[str, Any]:
    return {"featured": featured}


@router.get("/featured")
async def get_featured_plan(db: AsyncSession = Depends(get_db)) -> dict[str, object]:
    """The single featured plan."""
    plan = await plan_repository.get_featured(db)
    if plan is None:
        raise NotFoundError("No featured plan")
    return ok(serialize(PlanResponse, plan))


register_catalog_routes(
    router,
    CatalogResource(
        repository=plan_repository.repository,
        label="Plan",
        create_schema=PlanCreate,
        update_schema=PlanUpdate,
        response_schema=PlanResponse,
        reorder_schema=PlanReorderRequest,
        filters=plan_filters,
    ),
)
