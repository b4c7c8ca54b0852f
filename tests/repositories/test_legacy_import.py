"""Import of the legacy JSON documents, including re-runs over existing rows."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from sqlalchemy import func, select

from app.core.errors import ValidationError
from app.db.models import BlogPost, Category, Content, Lead, Plan, Product, Service, User
from app.legacy_import import run_import

DOCUMENTS = {
    "contenido.json": {
        "inicio": {"hero": {"titulo": "BOOST"}},
        "contacto": {"email": "hola@boost.com"},
        "version": "1.0",
    },
    "servicios.json": {
        "servicios": [
            {"id": "seo", "titulo": "SEO", "descripcion": "Posicionamiento", "caracteristicas": ["x"]},
            {"id": "ads", "titulo": "Ads", "descripcion": "Pauta digital"},
        ]
    },
    "planes.json": {
        "planes": [
            {"id": "basico", "nombre": "Básico", "precio": 199},
            {"id": "pro", "nombre": "Pro", "precio": "499", "destacado": True},
        ],
        "preguntas_frecuentes": [{"pregunta": "¿Permanencia?", "respuesta": "No"}],
    },
    "blog.json": {
        "boostcast": {"titulo": "BOOSTCAST"},
        "episodios": [
            {"id": "ep-1", "numero": 1, "titulo": "Inicio", "fecha": "2024-02-01", "temas": ["Marca"]},
        ],
    },
    "tienda.json": {
        "categorias": [{"id": "cursos", "nombre": "Cursos"}],
        "productos": [
            {"id": "curso-ads", "nombre": "Curso Ads", "precio": 89, "categoria": "cursos"},
        ],
        "metodos_pago": ["Tarjeta"],
    },
    "leads.json": {
        "leads": [
            {
                "nombre": "Ana",
                "email": "ana@example.com",
                "telefono": "555",
                "servicio_interes": "seo",
                "fecha": "2024-03-01T10:00:00.000Z",
                "estado": "contactado",
            },
            {"nombre": "Sin datos"},
        ]
    },
}


@pytest.fixture
def legacy_dir(tmp_path: Path) -> Path:
    for name, document in DOCUMENTS.items():
        (tmp_path / name).write_text(json.dumps(document, ensure_ascii=False), encoding="utf-8")
    return tmp_path


async def count(db, model) -> int:
    return (await db.execute(select(func.count()).select_from(model))).scalar_one()


async def test_run_import_populates_every_table(db, legacy_dir: Path) -> None:
    report = await run_import(
        db, legacy_dir, admin_email="admin@boost.com", admin_password="clave-segura"
    )

    assert report.counts["services"] == 2
    assert report.counts["plans"] == 2
    assert report.counts["episodes"] == 1
    assert report.counts["products"] == 1
    assert report.counts["categories"] == 1
    assert report.counts["leads"] == 1
    assert report.counts["content"] == 5
    assert "content:version" in report.skipped
    assert "lead:None" in report.skipped

    assert await count(db, User) == 1
    assert await count(db, Service) == 2
    assert await count(db, Category) == 1
    assert await count(db, Lead) == 1

    featured = (await db.execute(select(Plan.plan_id).where(Plan.is_featured.is_(True)))).scalars().all()
    assert featured == ["pro"]

    keys = (await db.execute(select(Content.section_key).order_by(Content.section_key))).scalars().all()
    assert keys == ["boostcast", "contacto", "inicio", "planes_info", "tienda_info"]

    episode_status = (await db.execute(select(BlogPost.status))).scalar_one()
    assert episode_status == "published"
    product_category = (await db.execute(select(Product.category_id))).scalar_one()
    assert product_category is not None
    lead_estado = (await db.execute(select(Lead.estado))).scalar_one()
    assert lead_estado == "contactado"


async def test_rerun_updates_catalogs_instead_of_duplicating(db, legacy_dir: Path) -> None:
    await run_import(db, legacy_dir, admin_email="admin@boost.com", admin_password="clave-segura")

    servicios = DOCUMENTS["servicios.json"]["servicios"]
    changed = {"servicios": [{**servicios[0], "titulo": "SEO Avanzado"}, servicios[1]]}
    (legacy_dir / "servicios.json").write_text(json.dumps(changed), encoding="utf-8")

    report = await run_import(
        db, legacy_dir, admin_email="admin@boost.com", admin_password="clave-segura"
    )

    assert report.counts["services"] == 2
    assert await count(db, Service) == 2
    assert await count(db, Plan) == 2
    assert await count(db, User) == 1
    title = (await db.execute(select(Service.title).where(Service.service_id == "seo"))).scalar_one()
    assert title == "SEO Avanzado"


async def test_missing_directory_is_rejected(db, tmp_path: Path) -> None:
    with pytest.raises(ValidationError):
        await run_import(
            db, tmp_path / "nope", admin_email="admin@boost.com", admin_password="clave-segura"
        )
