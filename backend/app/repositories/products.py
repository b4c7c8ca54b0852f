"""
Product repository — store products and their categories.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.constants import CatalogStatus
from app.core.logging import get_logger
from app.db.models.category import Category
from app.db.models.product import Product
from app.db.session import atomic
from app.repositories.base import LIKE_ESCAPE, CatalogRepository, escape_like

logger = get_logger("repositories.products")

repository: CatalogRepository[Product] = CatalogRepository(
    Product,
    key_field="product_id",
    required=("product_id", "name", "price"),
    updatable=(
        "name",
        "description",
        "price",
        "discount_price",
        "price_currency",
        "image_url",
        "is_featured",
        "features",
        "includes",
        "category_id",
        "display_order",
        "status",
    ),
    statuses=tuple(CatalogStatus),
    visible_statuses=(CatalogStatus.ACTIVE,),
    inactive_status=CatalogStatus.INACTIVE,
    order_by=(Product.display_order.asc(), Product.created_at.desc()),
    filters={
        "category_id": lambda value: Product.category_id == value,
        "featured": lambda value: Product.is_featured.is_(bool(value)),
    },
    featured_field="is_featured",
)


async def get_featured(db: AsyncSession, limit: int = 3) -> list[Product]:
    """Featured active products in display order."""
    stmt = (
        select(Product)
        .where(Product.is_featured.is_(True), Product.status == CatalogStatus.ACTIVE.value)
        .order_by(*repository.order_by)
        .limit(limit)
    )
    return list((await db.execute(stmt)).scalars().all())


async def search(db: AsyncSession, term: str, limit: int = 20) -> list[Product]:
    """Case-insensitive match on name or description among active products."""
    pattern = f"%{escape_like(term)}%"
    stmt = (
        select(Product)
        .where(
            Product.status == CatalogStatus.ACTIVE.value,
            or_(
                Product.name.ilike(pattern, escape=LIKE_ESCAPE),
                Product.description.ilike(pattern, escape=LIKE_ESCAPE),
            ),
        )
        .order_by(*repository.order_by)
        .limit(limit)
    )
    return list((await db.execute(stmt)).scalars().all())


# ─── Categories ───────────────────────────────
async def list_categories(db: AsyncSession) -> list[Category]:
    stmt = select(Category).order_by(Category.name.asc())
    return list((await db.execute(stmt)).scalars().all())


async def get_category_by_slug(db: AsyncSession, slug: str) -> Category | None:
    stmt = select(Category).where(Category.slug == slug)
    return (await db.execute(stmt)).scalar_one_or_none()


async def upsert_category(
    db: AsyncSession,
    *,
    slug: str,
    name: str,
    description: str | None = None,
) -> Category:
    """Create a category or rename the existing one with the same slug."""
    async with atomic(db):
        category = await get_category_by_slug(db, slug)
        if category is None:
            category = Category(slug=slug, name=name, description=description)
            db.add(category)
        else:
            category.name = name
            if description is not None:
                category.description = description
        await db.flush()
    logger.info("Category saved", slug=slug)
    return category


async def list_by_category(
    db: AsyncSession,
    slug: str,
    *,
    offset: int = 0,
    limit: int = 20,
):
    """Active products of one category; None when the slug is unknown."""
    category = await get_category_by_slug(db, slug)
    if category is None:
        return None
    return await repository.list(
        db, filters={"category_id": category.id}, offset=offset, limit=limit
    )


# ─── Legacy import ────────────────────────────
def from_legacy(
    record: dict[str, Any],
    position: int,
    categories: dict[str, uuid.UUID],
) -> dict[str, Any]:
    """Map one entry of the legacy `productos` document onto Product columns."""
    discount = record.get("precio_descuento")
    return {
        "product_id": record.get("id"),
        "name": record.get("nombre"),
        "description": record.get("descripcion"),
        "price": float(record.get("precio") or 0),
        "discount_price": float(discount) if discount else None,
        "price_currency": "USD",
        "image_url": record.get("imagen"),
        "is_featured": bool(record.get("destacado", False)),
        "features": record.get("caracteristicas") or [],
        "includes": record.get("incluye") or [],
        "category_id": categories.get(record.get("categoria")),
        "display_order": position,
        "status": CatalogStatus.ACTIVE.value,
    }


async def import_legacy(
    db: AsyncSession,
    records: list[dict[str, Any]],
    categories: dict[str, uuid.UUID] | None = None,
    user_id: uuid.UUID | None = None,
) -> list[Product]:
    """Import legacy products; `categories` maps legacy category ids to rows."""
    mapped = [
        from_legacy(record, position, categories or {})
        for position, record in enumerate(records)
    ]
    return await repository.import_records(db, mapped, user_id=user_id)
