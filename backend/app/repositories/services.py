"""
Service repository — agency services catalog.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.constants import CatalogStatus
from app.db.models.service import Service
from app.repositories.base import CatalogRepository

repository: CatalogRepository[Service] = CatalogRepository(
    Service,
    key_field="service_id",
    required=("service_id", "title", "description"),
    updatable=(
        "title",
        "description",
        "image_url",
        "features",
        "benefits",
        "display_order",
        "status",
    ),
    statuses=tuple(CatalogStatus),
    visible_statuses=(CatalogStatus.ACTIVE,),
    inactive_status=CatalogStatus.INACTIVE,
    order_by=(Service.display_order.asc(), Service.created_at.asc()),
)


def from_legacy(record: dict[str, Any], position: int) -> dict[str, Any]:
    """Map one entry of the legacy `servicios` document onto Service columns."""
    return {
        "service_id": record.get("id"),
        "title": record.get("titulo"),
        "description": record.get("descripcion"),
        "image_url": record.get("imagen"),
        "features": record.get("caracteristicas") or [],
        "benefits": record.get("beneficios") or [],
        "display_order": position,
        "status": CatalogStatus.ACTIVE.value,
    }


async def import_legacy(
    db: AsyncSession,
    records: list[dict[str, Any]],
    user_id: uuid.UUID | None = None,
) -> list[Service]:
    """Import the legacy services list, updating services that already exist."""
    mapped = [from_legacy(record, position) for position, record in enumerate(records)]
    return await repository.import_records(db, mapped, user_id=user_id)
