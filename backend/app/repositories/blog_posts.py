"""
Blog repository — BOOSTCAST podcast episodes.

Soft delete archives an episode; readers only ever see `published` ones.
"""

from __future__ import annotations

import uuid
from datetime import date
from typing import Any

from sqlalchemy import Text, cast, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.constants import EpisodeStatus
from app.db.models.blog_post import BlogPost
from app.repositories.base import LIKE_ESCAPE, CatalogRepository, escape_like


def _has_topic(topic: str):
    # topics is a JSON array of strings; match the quoted element in its text form
    pattern = f'%"{escape_like(topic.lower())}"%'
    return func.lower(cast(BlogPost.topics, Text)).like(pattern, escape=LIKE_ESCAPE)


repository: CatalogRepository[BlogPost] = CatalogRepository(
    BlogPost,
    key_field="episode_id",
    required=("episode_id", "episode_number", "title"),
    updatable=(
        "episode_number",
        "title",
        "description",
        "publish_date",
        "duration",
        "guest_name",
        "guest_title",
        "cover_image_url",
        "audio_url",
        "is_featured",
        "topics",
        "display_order",
        "status",
    ),
    statuses=tuple(EpisodeStatus),
    visible_statuses=(EpisodeStatus.PUBLISHED,),
    inactive_status=EpisodeStatus.ARCHIVED,
    order_by=(
        BlogPost.display_order.asc(),
        BlogPost.publish_date.desc(),
        BlogPost.episode_number.desc(),
    ),
    filters={
        "featured": lambda value: BlogPost.is_featured.is_(bool(value)),
        "topic": _has_topic,
    },
    owner_field="author_id",
    featured_field="is_featured",
)

_published = BlogPost.status == EpisodeStatus.PUBLISHED.value
_newest_first = (BlogPost.publish_date.desc(), BlogPost.episode_number.desc())


async def get_recent(db: AsyncSession, limit: int = 5) -> list[BlogPost]:
    """Newest published episodes."""
    stmt = select(BlogPost).where(_published).order_by(*_newest_first).limit(limit)
    return list((await db.execute(stmt)).scalars().all())


async def get_featured(db: AsyncSession) -> list[BlogPost]:
    """Published episodes flagged as featured."""
    stmt = (
        select(BlogPost)
        .where(_published, BlogPost.is_featured.is_(True))
        .order_by(*_newest_first)
    )
    return list((await db.execute(stmt)).scalars().all())


async def increment_views(db: AsyncSession, key: str) -> int | None:
    """Bump `views_count` in one statement; None when the episode is not published."""
    stmt = (
        update(BlogPost)
        .where(BlogPost.episode_id == key, _published)
        .values(views_count=BlogPost.views_count + 1)
        .returning(BlogPost.views_count)
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def get_stats(db: AsyncSession) -> dict[str, Any]:
    """Episode counts per status plus view totals."""
    stmt = select(BlogPost.status, func.count(), func.coalesce(func.sum(BlogPost.views_count), 0)).group_by(
        BlogPost.status
    )
    rows = (await db.execute(stmt)).all()
    per_status = {status: count for status, count, _ in rows}
    total = sum(per_status.values())
    total_views = int(sum(views for _, _, views in rows))
    return {
        "total": total,
        "published": per_status.get(EpisodeStatus.PUBLISHED.value, 0),
        "draft": per_status.get(EpisodeStatus.DRAFT.value, 0),
        "archived": per_status.get(EpisodeStatus.ARCHIVED.value, 0),
        "total_views": total_views,
        "avg_views": round(total_views / total, 2) if total else 0,
    }


def _parse_date(value: Any) -> date | None:
    if not value:
        return None
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def from_legacy(record: dict[str, Any], position: int) -> dict[str, Any]:
    """Map one entry of the legacy `episodios` document onto BlogPost columns."""
    return {
        "episode_id": record.get("id"),
        "episode_number": record.get("numero") or position + 1,
        "title": record.get("titulo"),
        "description": record.get("descripcion"),
        "publish_date": _parse_date(record.get("fecha")),
        "duration": record.get("duracion"),
        "guest_name": record.get("invitado"),
        "guest_title": record.get("cargo_invitado"),
        "cover_image_url": record.get("imagen"),
        "audio_url": record.get("audio_url"),
        "is_featured": bool(record.get("destacado", False)),
        "topics": record.get("temas") or [],
        "status": EpisodeStatus.PUBLISHED.value,
    }


async def import_legacy(
    db: AsyncSession,
    records: list[dict[str, Any]],
    user_id: uuid.UUID | None = None,
) -> list[BlogPost]:
    """Import legacy episodes, updating episodes that already exist."""
    mapped = [from_legacy(record, position) for position, record in enumerate(records)]
    return await repository.import_records(db, mapped, user_id=user_id)
