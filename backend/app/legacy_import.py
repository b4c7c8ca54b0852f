"""
Import of the legacy JSON documents (`content/formularios/*.json`).

Steps run in order against one session; the caller commits:

    1. admin user (created when missing)
    2. content sections (contenido.json, fundacion.json)
    3. services (servicios.json)
    4. podcast info + episodes (blog.json)
    5. plans + plan benefits/FAQ (planes.json)
    6. categories + products + store info (tienda.json)
    7. leads (leads.json)

Catalog imports are idempotent: an existing business key is updated in place.
"""

from __future__ import annotations

import json
import uuid
from datetime import datetime
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.constants import UserRole
from app.core.errors import ValidationError
from app.core.logging import get_logger
from app.repositories import blog_posts, content, leads, plans, products, services, users

logger = get_logger("legacy_import")


@dataclass
class ImportReport:
    """Row counts per imported step."""

    counts: dict[str, int] = field(default_factory=dict)
    skipped: list[str] = field(default_factory=list)

    def add(self, step: str, count: int) -> None:
        self.counts[step] = self.counts.get(step, 0) + count


def read_document(directory: Path, name: str) -> dict[str, Any] | None:
    """Parse one legacy JSON file; None when the file does not exist."""
    path = directory / name
    if not path.exists():
        logger.warning("Legacy file not found", file=str(path))
        return None
    with path.open(encoding="utf-8") as handle:
        return json.load(handle)


async def ensure_admin(
    db: AsyncSession,
    *,
    email: str,
    password: str,
    full_name: str,
) -> uuid.UUID:
    existing = await users.get_user_by_email(db, email)
    if existing is not None:
        logger.info("Admin user already exists", user_id=str(existing.id))
        return existing.id
    admin = await users.create_user(
        db, email=email, password=password, full_name=full_name, role=UserRole.ADMIN.value
    )
    logger.info("Admin user created", user_id=str(admin.id))
    return admin.id


async def import_content(db: AsyncSession, directory: Path, admin_id: uuid.UUID, report: ImportReport) -> None:
    contenido = read_document(directory, "contenido.json")
    for key, value in (contenido or {}).items():
        if not isinstance(value, dict):
            report.skipped.append(f"content:{key}")
            continue
        await content.upsert(db, section_key=key, content_data=value, user_id=admin_id)
        report.add("content", 1)

    fundacion = read_document(directory, "fundacion.json")
    if fundacion and isinstance(fundacion.get("fundacion"), dict):
        await content.upsert(
            db, section_key="fundacion", content_data=fundacion["fundacion"], user_id=admin_id
        )
        report.add("content", 1)


async def import_blog(db: AsyncSession, directory: Path, admin_id: uuid.UUID, report: ImportReport) -> None:
    data = read_document(directory, "blog.json")
    if not data:
        return
    if isinstance(data.get("boostcast"), dict):
        await content.upsert(
            db, section_key="boostcast", content_data=data["boostcast"], user_id=admin_id
        )
        report.add("content", 1)
    episodes = await blog_posts.import_legacy(db, data.get("episodios") or [], user_id=admin_id)
    report.add("episodes", len(episodes))


async def import_plans(db: AsyncSession, directory: Path, admin_id: uuid.UUID, report: ImportReport) -> None:
    data = read_document(directory, "planes.json")
    if not data:
        return
    imported = await plans.import_legacy(db, data.get("planes") or [], user_id=admin_id)
    report.add("plans", len(imported))
    if data.get("beneficios_generales") or data.get("preguntas_frecuentes"):
        await content.upsert(
            db,
            section_key="planes_info",
            content_data={
                "beneficios": data.get("beneficios_generales") or [],
                "faqs": data.get("preguntas_frecuentes") or [],
            },
            user_id=admin_id,
        )
        report.add("content", 1)


async def import_store(db: AsyncSession, directory: Path, admin_id: uuid.UUID, report: ImportReport) -> None:
    data = read_document(directory, "tienda.json")
    if not data:
        return
    categories: dict[str, uuid.UUID] = {}
    for entry in data.get("categorias") or []:
        category = await products.upsert_category(
            db, slug=entry["id"], name=entry.get("nombre") or entry["id"], description=entry.get("descripcion")
        )
        categories[entry["id"]] = category.id
    report.add("categories", len(categories))

    imported = await products.import_legacy(
        db, data.get("productos") or [], categories=categories, user_id=admin_id
    )
    report.add("products", len(imported))

    if data.get("beneficios_compra") or data.get("metodos_pago"):
        await content.upsert(
            db,
            section_key="tienda_info",
            content_data={
                "beneficios": data.get("beneficios_compra") or [],
                "metodos_pago": data.get("metodos_pago") or [],
            },
            user_id=admin_id,
        )
        report.add("content", 1)


async def import_leads(db: AsyncSession, directory: Path, report: ImportReport) -> None:
    data = read_document(directory, "leads.json")
    for entry in (data or {}).get("leads") or []:
        fields = dict(entry)
        if isinstance(fields.get("fecha"), str):
            fields["fecha"] = datetime.fromisoformat(fields["fecha"].replace("Z", "+00:00"))
        try:
            await leads.create_lead(db, fields)
        except ValidationError as exc:
            logger.warning("Legacy lead skipped", email=entry.get("email"), error=exc.message)
            report.skipped.append(f"lead:{entry.get('email')}")
            continue
        report.add("leads", 1)


async def run_import(
    db: AsyncSession,
    directory: str | Path,
    *,
    admin_email: str,
    admin_password: str,
    admin_name: str = "Administrador",
) -> ImportReport:
    """Import every legacy document found in `directory`."""
    directory = Path(directory)
    if not directory.is_dir():
        raise ValidationError(f"Legacy data directory not found: {directory}")

    report = ImportReport()
    logger.info("Legacy import started", directory=str(directory))
    admin_id = await ensure_admin(
        db, email=admin_email, password=admin_password, full_name=admin_name
    )

    await import_content(db, directory, admin_id, report)

    servicios = read_document(directory, "servicios.json")
    if servicios:
        imported = await services.import_legacy(db, servicios.get("servicios") or [], user_id=admin_id)
        report.add("services", len(imported))

    await import_blog(db, directory, admin_id, report)
    await import_plans(db, directory, admin_id, report)
    await import_store(db, directory, admin_id, report)
    await import_leads(db, directory, report)

    logger.info("Legacy import finished", counts=report.counts, skipped=len(report.skipped))
    return report
