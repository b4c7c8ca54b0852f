"""
Lead repository — contact-form submissions and the small CRM around them.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy import extract, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.constants import DEFAULT_LEAD_ORIGIN, LeadStatus
from app.core.errors import NotFoundError, ValidationError
from app.core.logging import get_logger
from app.db.models.base import utcnow
from app.db.models.lead import Lead
from app.repositories.base import LIKE_ESCAPE, ListResult, escape_like

logger = get_logger("repositories.leads")

REQUIRED_FIELDS = ("nombre", "email", "telefono", "servicio_interes")
UPDATABLE_FIELDS = frozenset(
    {
        "nombre",
        "email",
        "telefono",
        "empresa",
        "servicio_interes",
        "presupuesto",
        "mensaje",
        "estado",
    }
)
STATUSES = tuple(LeadStatus)

_FILTERS = {
    "estado": lambda value: Lead.estado == value,
    "servicio": lambda value: Lead.servicio_interes == value,
    "fecha_desde": lambda value: Lead.fecha >= value,
    "fecha_hasta": lambda value: Lead.fecha <= value,
    "assigned_to": lambda value: Lead.assigned_to == value,
}


def _check_estado(estado: str) -> None:
    if estado not in STATUSES:
        raise ValidationError(
            f"Invalid estado '{estado}'. Allowed values: {', '.join(STATUSES)}"
        )


async def create_lead(db: AsyncSession, fields: dict[str, Any]) -> Lead:
    """Store a new lead; `estado` starts at `nuevo` unless given."""
    missing = [name for name in REQUIRED_FIELDS if not fields.get(name)]
    if missing:
        raise ValidationError(
            "Missing required fields",
            details={"campos_faltantes": missing},
        )
    estado = fields.get("estado") or LeadStatus.NUEVO.value
    _check_estado(estado)

    lead = Lead(
        nombre=fields["nombre"].strip(),
        email=fields["email"].strip().lower(),
        telefono=fields["telefono"].strip(),
        empresa=fields.get("empresa"),
        servicio_interes=fields["servicio_interes"],
        presupuesto=fields.get("presupuesto"),
        mensaje=fields.get("mensaje"),
        origen=fields.get("origen") or DEFAULT_LEAD_ORIGIN,
        estado=estado,
    )
    if fields.get("fecha"):
        lead.fecha = fields["fecha"]
    db.add(lead)
    await db.flush()
    logger.info("Lead created", lead_id=str(lead.id), servicio=lead.servicio_interes)
    return lead


async def get_lead(db: AsyncSession, lead_id: uuid.UUID) -> Lead | None:
    return await db.get(Lead, lead_id)


async def _get_for_write(db: AsyncSession, lead_id: uuid.UUID) -> Lead:
    lead = await get_lead(db, lead_id)
    if lead is None:
        raise NotFoundError(f"Lead '{lead_id}' not found")
    return lead


async def list_leads(
    db: AsyncSession,
    *,
    filters: dict[str, Any] | None = None,
    offset: int = 0,
    limit: int = 20,
) -> ListResult[Lead]:
    """Newest-first page of leads matching the allow-listed filters."""
    clauses = [
        _FILTERS[name](value)
        for name, value in (filters or {}).items()
        if name in _FILTERS and value not in (None, "")
    ]
    count_stmt = select(func.count()).select_from(Lead).where(*clauses)
    total = (await db.execute(count_stmt)).scalar_one()

    stmt = (
        select(Lead)
        .where(*clauses)
        .order_by(Lead.fecha.desc())
        .offset(max(offset, 0))
        .limit(max(limit, 1))
    )
    items = list((await db.execute(stmt)).scalars().all())
    return ListResult(items=items, total=total)


async def update_lead(db: AsyncSession, lead_id: uuid.UUID, fields: dict[str, Any]) -> Lead:
    """Apply allow-listed fields to a lead."""
    data = {
        name: value
        for name, value in fields.items()
        if name in UPDATABLE_FIELDS and value is not None
    }
    if not data:
        raise ValidationError("No valid fields to update")
    if "estado" in data:
        _check_estado(data["estado"])

    lead = await _get_for_write(db, lead_id)
    for name, value in data.items():
        setattr(lead, name, value)
    lead.updated_at = utcnow()
    await db.flush()
    logger.info("Lead updated", lead_id=str(lead_id), fields=sorted(data))
    return lead


async def update_estado(db: AsyncSession, lead_id: uuid.UUID, estado: str) -> Lead:
    """Move a lead to any pipeline stage."""
    _check_estado(estado)
    lead = await _get_for_write(db, lead_id)
    lead.estado = estado
    lead.updated_at = utcnow()
    await db.flush()
    logger.info("Lead estado changed", lead_id=str(lead_id), estado=estado)
    return lead


async def assign_to(db: AsyncSession, lead_id: uuid.UUID, user_id: uuid.UUID | None) -> Lead:
    lead = await _get_for_write(db, lead_id)
    lead.assigned_to = user_id
    lead.updated_at = utcnow()
    await db.flush()
    logger.info("Lead assigned", lead_id=str(lead_id), assigned_to=str(user_id) if user_id else None)
    return lead


async def delete_lead(db: AsyncSession, lead_id: uuid.UUID) -> None:
    """Hard-delete a lead."""
    lead = await _get_for_write(db, lead_id)
    await db.delete(lead)
    await db.flush()
    logger.warning("Lead deleted", lead_id=str(lead_id))


async def search_leads(db: AsyncSession, term: str, limit: int = 10) -> list[Lead]:
    """Case-insensitive match on name, email, company or message."""
    pattern = f"%{escape_like(term)}%"
    stmt = (
        select(Lead)
        .where(
            or_(
                Lead.nombre.ilike(pattern, escape=LIKE_ESCAPE),
                Lead.email.ilike(pattern, escape=LIKE_ESCAPE),
                Lead.empresa.ilike(pattern, escape=LIKE_ESCAPE),
                Lead.mensaje.ilike(pattern, escape=LIKE_ESCAPE),
            )
        )
        .order_by(Lead.fecha.desc())
        .limit(limit)
    )
    return list((await db.execute(stmt)).scalars().all())


async def get_statistics(db: AsyncSession, now: datetime | None = None) -> dict[str, Any]:
    """Totals per estado, per service, and per month over the last twelve months."""
    per_estado_rows = (
        await db.execute(select(Lead.estado, func.count()).group_by(Lead.estado))
    ).all()
    per_estado = {estado: count for estado, count in per_estado_rows}

    per_service_rows = (
        await db.execute(
            select(Lead.servicio_interes, func.count())
            .group_by(Lead.servicio_interes)
            .order_by(func.count().desc())
        )
    ).all()

    since = (now or utcnow()) - timedelta(days=365)
    year = extract("year", Lead.fecha)
    month = extract("month", Lead.fecha)
    per_month_rows = (
        await db.execute(
            select(year, month, func.count())
            .where(Lead.fecha >= since)
            .group_by(year, month)
            .order_by(year, month)
        )
    ).all()

    return {
        "total": sum(per_estado.values()),
        "nuevos": per_estado.get(LeadStatus.NUEVO.value, 0),
        "contactados": per_estado.get(LeadStatus.CONTACTADO.value, 0),
        "calificados": per_estado.get(LeadStatus.CALIFICADO.value, 0),
        "cerrados": per_estado.get(LeadStatus.CERRADO.value, 0),
        "por_servicio": {service: count for service, count in per_service_rows},
        "por_mes": {
            f"{int(y):04d}-{int(m):02d}": count for y, m, count in per_month_rows
        },
    }
