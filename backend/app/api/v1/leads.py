"""Lead capture (public) and lead CRM endpoints (editors)."""

from __future__ import annotations

import re
import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, require_roles
from app.api.pagination import normalize_pagination, ok, paginated, serialize
from app.api.schemas.leads import (
    LeadAssignRequest,
    LeadCreate,
    LeadEstadoRequest,
    LeadResponse,
    LeadUpdate,
)
from app.core.constants import ADMINS, EDITORS, EMAIL_PATTERN
from app.core.errors import NotFoundError, ValidationError
from app.core.logging import get_logger
from app.db.models.user import User
from app.repositories import leads as lead_repository
from app.repositories import users as user_repository

router = APIRouter(prefix="/leads", tags=["Leads"])
logger = get_logger("api.leads")

_email = re.compile(EMAIL_PATTERN)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_lead(payload: LeadCreate, db: AsyncSession = Depends(get_db)) -> dict[str, object]:
    """Public contact form submission."""
    fields = payload.model_dump()
    missing = [name for name in lead_repository.REQUIRED_FIELDS if not (fields.get(name) or "").strip()]
    if missing:
        raise ValidationError(
            f"Missing required fields: {', '.join(missing)}",
            details={"campos_faltantes": missing},
        )
    if not _email.match(fields["email"].strip()):
        raise ValidationError("Invalid email address")

    lead = await lead_repository.create_lead(db, fields)
    return ok(serialize(LeadResponse, lead), message="Lead received")


@router.get("")
async def list_leads(
    estado: str | None = None,
    servicio: str | None = None,
    fecha_desde: datetime | None = None,
    fecha_hasta: datetime | None = None,
    assigned_to: uuid.UUID | None = None,
    page: int = Query(1),
    limit: int = Query(20),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_roles(EDITORS)),
) -> dict[str, object]:
    spec = normalize_pagination(page, limit)
    result = await lead_repository.list_leads(
        db,
        filters={
            "estado": estado,
            "servicio": servicio,
            "fecha_desde": fecha_desde,
            "fecha_hasta": fecha_hasta,
            "assigned_to": assigned_to,
        },
        offset=spec.offset,
        limit=spec.limit,
    )
    return paginated(LeadResponse, result.items, result.total, spec)


@router.get("/estadisticas")
async def get_lead_statistics(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_roles(EDITORS)),
) -> dict[str, object]:
    return ok(await lead_repository.get_statistics(db))


@router.get("/search")
async def search_leads(
    q: str = Query(""),
    limit: int = Query(10),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_roles(EDITORS)),
) -> dict[str, object]:
    term = q.strip()
    if len(term) < 2:
        raise ValidationError("Search term must be at least 2 characters")
    leads = await lead_repository.search_leads(db, term, limit=max(1, min(limit, 50)))
    return ok(serialize(LeadResponse, leads))


@router.get("/{lead_id}")
async def get_lead(
    lead_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_roles(EDITORS)),
) -> dict[str, object]:
    lead = await lead_repository.get_lead(db, lead_id)
    if lead is None:
        raise NotFoundError("Lead not found")
    return ok(serialize(LeadResponse, lead))


@router.put("/{lead_id}/estado")
async def update_lead_estado(
    lead_id: uuid.UUID,
    payload: LeadEstadoRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_roles(EDITORS)),
) -> dict[str, object]:
    lead = await lead_repository.update_estado(db, lead_id, payload.estado)
    return ok(serialize(LeadResponse, lead), message="Lead estado updated")


@router.put("/{lead_id}/asignar")
async def assign_lead(
    lead_id: uuid.UUID,
    payload: LeadAssignRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_roles(EDITORS)),
) -> dict[str, object]:
    if payload.user_id is not None and await user_repository.get_user_by_id(db, payload.user_id) is None:
        raise NotFoundError("User not found")
    lead = await lead_repository.assign_to(db, lead_id, payload.user_id)
    return ok(serialize(LeadResponse, lead), message="Lead assigned")


@router.put("/{lead_id}")
async def update_lead(
    lead_id: uuid.UUID,
    payload: LeadUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_roles(EDITORS)),
) -> dict[str, object]:
    lead = await lead_repository.update_lead(db, lead_id, payload.model_dump(exclude_unset=True))
    return ok(serialize(LeadResponse, lead), message="Lead updated")


@router.delete("/{lead_id}")
async def delete_lead(
    lead_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_roles(ADMINS)),
) -> dict[str, object]:
    await lead_repository.delete_lead(db, lead_id)
    logger.warning("Lead removed", lead_id=str(lead_id), by=str(current_user.id))
    return ok(message="Lead deleted")
