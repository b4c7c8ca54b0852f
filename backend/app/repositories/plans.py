"""
Plan repository — pricing plans; at most one plan is featured at a time.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.constants import CatalogStatus
from app.db.models.plan import Plan
from app.repositories.base import CatalogRepository

repository: CatalogRepository[Plan] = CatalogRepository(
    Plan,
    key_field="plan_id",
    required=("plan_id", "name", "price"),
    updatable=(
        "name",
        "price",
        "price_currency",
        "billing_period",
        "description",
        "features",
        "is_featured",
        "cta_text",
        "notes",
        "display_order",
        "status",
    ),
    statuses=tuple(CatalogStatus),
    visible_statuses=(CatalogStatus.ACTIVE,),
    inactive_status=CatalogStatus.INACTIVE,
    order_by=(Plan.display_order.asc(), Plan.price.asc()),
    filters={"featured": lambda value: Plan.is_featured.is_(bool(value))},
    featured_field="is_featured",
    exclusive_featured=True,
)


async def get_featured(db: AsyncSession) -> Plan | None:
    """Return the featured active plan, if any."""
    stmt = select(Plan).where(
        Plan.is_featured.is_(True),
        Plan.status == CatalogStatus.ACTIVE.value,
    )
    return (await db.execute(stmt)).scalar_one_or_none()


def from_legacy(record: dict[str, Any], position: int) -> dict[str, Any]:
    """Map one entry of the legacy `planes` document onto Plan columns."""
    return {
        "plan_id": record.get("id"),
        "name": record.get("nombre"),
        "price": float(record.get("precio") or 0),
        "billing_period": record.get("periodo") or "mes",
        "description": record.get("descripcion"),
        "features": record.get("caracteristicas") or [],
        "is_featured": bool(record.get("destacado", False)),
        "cta_text": record.get("cta_texto") or "Comenzar Ahora",
        "notes": record.get("notas"),
        "display_order": position,
        "status": CatalogStatus.ACTIVE.value,
    }


async def import_legacy(
    db: AsyncSession,
    records: list[dict[str, Any]],
    user_id: uuid.UUID | None = None,
) -> list[Plan]:
    """Import the legacy plans list, updating plans that already exist."""
    mapped = [from_legacy(record, position) for position, record in enumerate(records)]
    return await repository.import_records(db, mapped, user_id=user_id)
