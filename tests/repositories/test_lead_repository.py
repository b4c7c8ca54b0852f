"""Lead repository: creation defaults, filters and statistics."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from app.core.errors import ValidationError
from app.repositories import leads

FORM = {
    "nombre": "Ana",
    "email": " Ana@Example.com ",
    "telefono": "555-0101",
    "servicio_interes": "seo",
}


async def test_create_lead_defaults(db) -> None:
    lead = await leads.create_lead(db, FORM)

    assert lead.estado == "nuevo"
    assert lead.origen == "formulario-web"
    assert lead.email == "ana@example.com"
    assert lead.fecha is not None


async def test_create_lead_reports_missing_fields(db) -> None:
    with pytest.raises(ValidationError) as excinfo:
        await leads.create_lead(db, {"nombre": "Ana"})

    assert excinfo.value.details == {"campos_faltantes": ["email", "telefono", "servicio_interes"]}


async def test_update_lead_rejects_unknown_estado(db) -> None:
    lead = await leads.create_lead(db, FORM)

    with pytest.raises(ValidationError):
        await leads.update_lead(db, lead.id, {"estado": "ganado"})
    with pytest.raises(ValidationError):
        await leads.update_lead(db, lead.id, {"origen": "hack"})


async def test_list_filters_by_estado_and_date(db) -> None:
    old = await leads.create_lead(
        db, {**FORM, "fecha": datetime(2023, 1, 15, tzinfo=timezone.utc)}
    )
    recent = await leads.create_lead(db, {**FORM, "nombre": "Beto"})
    await leads.update_estado(db, recent.id, "cerrado")

    closed = await leads.list_leads(db, filters={"estado": "cerrado"})
    since_2024 = await leads.list_leads(
        db, filters={"fecha_desde": datetime(2024, 1, 1, tzinfo=timezone.utc)}
    )
    everything = await leads.list_leads(db, filters={"unknown": "ignored"})

    assert [lead.nombre for lead in closed.items] == ["Beto"]
    assert [lead.nombre for lead in since_2024.items] == ["Beto"]
    assert everything.total == 2
    assert [lead.id for lead in everything.items] == [recent.id, old.id]


async def test_statistics_only_count_last_year_per_month(db) -> None:
    now = datetime.now(timezone.utc)
    await leads.create_lead(db, FORM)
    await leads.create_lead(db, {**FORM, "servicio_interes": "branding"})
    await leads.create_lead(db, {**FORM, "fecha": now - timedelta(days=800)})

    stats = await leads.get_statistics(db, now=now)

    assert stats["total"] == 3
    assert stats["nuevos"] == 3
    assert stats["por_servicio"] == {"seo": 2, "branding": 1}
    assert stats["por_mes"] == {now.strftime("%Y-%m"): 2}
