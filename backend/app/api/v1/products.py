"""Store endpoints: products and product categories."""

import uuid
from typing import Any

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, require_roles
from app.api.pagination import normalize_pagination, ok, paginated, serialize
from app.api.schemas.catalog import (
    CategoryCreate,
    CategoryResponse,
    ProductCreate,
    ProductReorderRequest,
    ProductResponse,
    ProductUpdate,
)
from app.api.v1.catalog import CatalogResource, register_catalog_routes
from app.core.constants import EDITORS
from app.core.errors import NotFoundError, ValidationError
from app.db.models.user import User
from app.repositories import products as product_repository

router = APIRouter(prefix="/tienda/productos", tags=["Store"])
categories_router = APIRouter(prefix="/tienda/categorias", tags=["Store"])


def product_filters(
    category_id: uuid.UUID | None = None,
    featured: bool | None = None,
) -> dict[str, Any]:
    return {"category_id": category_id, "featured": featured}


@router.get("/featured")
async def get_featured_products(
    limit: int = Query(3),
    db: AsyncSession = Depends(get_db),
) -> dict[str, object]:
    products = await product_repository.get_featured(db, limit=max(1, min(limit, 50)))
    return ok(serialize(ProductResponse, products))


@router.get("/search")
async def search_products(
    q: str = Query(""),
    db: AsyncSession = Depends(get_db),
) -> dict[str, object]:
    term = q.strip()
    if len(term) < 2:
        raise ValidationError("Search term must be at least 2 characters")
    products = await product_repository.search(db, term)
    return ok(serialize(ProductResponse, products))


register_catalog_routes(
    router,
    CatalogResource(
        repository=product_repository.repository,
        label="Product",
        create_schema=ProductCreate,
        update_schema=ProductUpdate,
        response_schema=ProductResponse,
        reorder_schema=ProductReorderRequest,
        filters=product_filters,
    ),
)


# ─── Categories ───────────────────────────────
@categories_router.get("")
async def list_categories(db: AsyncSession = Depends(get_db)) -> dict[str, object]:
    categories = await product_repository.list_categories(db)
    return ok(serialize(CategoryResponse, categories))


@categories_router.post("", status_code=status.HTTP_201_CREATED)
async def save_category(
    payload: CategoryCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_roles(EDITORS)),
) -> dict[str, object]:
    category = await product_repository.upsert_category(
        db, slug=payload.slug, name=payload.name, description=payload.description
    )
    return ok(serialize(CategoryResponse, category), message="Category saved")


@categories_router.get("/{slug}/productos")
async def list_category_products(
    slug: str,
    page: int = Query(1),
    limit: int = Query(20),
    db: AsyncSession = Depends(get_db),
) -> dict[str, object]:
    spec = normalize_pagination(page, limit)
    result = await product_repository.list_by_category(
        db, slug, offset=spec.offset, limit=spec.limit
    )
    if result is None:
        raise NotFoundError("Category not found")
    return paginated(ProductResponse, result.items, result.total, spec)
