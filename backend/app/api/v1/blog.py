"""BOOSTCAST podcast episode endpoints."""

from typing import Any

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, require_roles
from app.api.pagination import ok, serialize
from app.api.schemas.catalog import (
    EpisodeCreate,
    EpisodeReorderRequest,
    EpisodeResponse,
    EpisodeUpdate,
)
from app.api.v1.catalog import CatalogResource, register_catalog_routes
from app.core.constants import EDITORS
from app.core.errors import NotFoundError
from app.db.models.user import User
from app.repositories import blog_posts as episode_repository

router = APIRouter(prefix="/blog/episodios", tags=["Blog"])


def episode_filters(
    featured: bool | None = None,
    topic: str | None = None,
) -> dict[str, Any]:
    return {"featured": featured, "topic": topic}


@router.get("/recent")
async def get_recent_episodes(
    limit: int = Query(5),
    db: AsyncSession = Depends(get_db),
) -> dict[str, object]:
    episodes = await episode_repository.get_recent(db, limit=max(1, min(limit, 50)))
    return ok(serialize(EpisodeResponse, episodes))


@router.get("/featured")
async def get_featured_episodes(db: AsyncSession = Depends(get_db)) -> dict[str, object]:
    episodes = await episode_repository.get_featured(db)
    return ok(serialize(EpisodeResponse, episodes))


@router.get("/estadisticas")
async def get_episode_stats(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_roles(EDITORS)),
) -> dict[str, object]:
    return ok(await episode_repository.get_stats(db))


@router.post("/{key}/view")
async def register_view(key: str, db: AsyncSession = Depends(get_db)) -> dict[str, object]:
    """Count one play/view of a published episode."""
    views = await episode_repository.increment_views(db, key)
    if views is None:
        raise NotFoundError("Episode not found")
    return ok({"episode_id": key, "views_count": views})


register_catalog_routes(
    router,
    CatalogResource(
        repository=episode_repository.repository,
        label="Episode",
        create_schema=EpisodeCreate,
        update_schema=EpisodeUpdate,
        response_schema=EpisodeResponse,
        reorder_schema=EpisodeReorderRequest,
        filters=episode_filters,
    ),
)
