"""
Content repository — one JSON document per website section.

Sections are a fixed, known set, so writes are upserts keyed on
`section_key`. `update_partial` sets a single nested value inside the
stored document in one UPDATE statement, leaving sibling keys untouched;
the path merge runs inside the database (`jsonb_set` on PostgreSQL,
`json_set` on SQLite) so concurrent updates to different paths of the
same section both survive.
"""

from __future__ import annotations

import json
import uuid
from typing import Any

from sqlalchemy import ColumnElement, Text, case, func, literal, select, true, type_coerce, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.dialects.postgresql import ARRAY, JSONB
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.constants import SECTION_NAMES, ContentStatus
from app.core.errors import NotFoundError, ValidationError
from app.core.logging import get_logger
from app.db.models.base import utcnow
from app.db.models.content import Content

logger = get_logger("repositories.content")

STATUSES = tuple(ContentStatus)


def section_name_for(section_key: str) -> str:
    """Display name of a known section, falling back to its key."""
    return SECTION_NAMES.get(section_key, section_key)


def parse_path(path: str) -> list[str]:
    """Split `hero.titulo` into `['hero', 'titulo']`; empty segments are rejected."""
    segments = [segment.strip() for segment in (path or "").split(".")]
    if not segments or any(not segment for segment in segments):
        raise ValidationError(f"Invalid content path '{path}'")
    return segments


def _check_status(status: str) -> None:
    if status not in STATUSES:
        raise ValidationError(
            f"Invalid status '{status}'. Allowed values: {', '.join(STATUSES)}"
        )


def _dialect(db: AsyncSession) -> str:
    return db.get_bind().dialect.name


# ─── Reads ────────────────────────────────────
async def get_by_section_key(
    db: AsyncSession,
    section_key: str,
    *,
    include_unpublished: bool = False,
) -> Content | None:
    """Fetch one section; only published sections unless asked otherwise."""
    stmt = select(Content).where(Content.section_key == section_key)
    if not include_unpublished:
        stmt = stmt.where(Content.status == ContentStatus.PUBLISHED.value)
    return (await db.execute(stmt)).scalar_one_or_none()


async def list_sections(db: AsyncSession, *, status: str | None = None) -> list[Content]:
    """All sections ordered by key, optionally filtered by status."""
    stmt = select(Content).order_by(Content.section_key.asc())
    if status:
        _check_status(status)
        stmt = stmt.where(Content.status == status)
    return list((await db.execute(stmt)).scalars().all())


async def _reload(db: AsyncSession, section_key: str) -> Content:
    stmt = (
        select(Content)
        .where(Content.section_key == section_key)
        .execution_options(populate_existing=True)
    )
    record = (await db.execute(stmt)).scalar_one_or_none()
    if record is None:
        raise NotFoundError(f"Section '{section_key}' not found")
    return record


# ─── Writes ───────────────────────────────────
async def upsert(
    db: AsyncSession,
    *,
    section_key: str,
    content_data: dict[str, Any],
    section_name: str | None = None,
    status: str = ContentStatus.PUBLISHED.value,
    user_id: uuid.UUID | None = None,
) -> Content:
    """Insert a section or replace the stored one with the same key."""
    if not isinstance(content_data, dict):
        raise ValidationError("content_data must be an object")
    _check_status(status)

    now = utcnow()
    name = section_name or section_name_for(section_key)
    insert = postgresql.insert if _dialect(db) == "postgresql" else sqlite.insert
    stmt = insert(Content).values(
        id=uuid.uuid4(),
        section_key=section_key,
        section_name=name,
        content_data=content_data,
        status=status,
        created_by=user_id,
        updated_by=user_id,
        created_at=now,
        updated_at=now,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[Content.section_key],
        set_={
            "section_name": stmt.excluded.section_name,
            "content_data": stmt.excluded.content_data,
            "status": stmt.excluded.status,
            "updated_by": stmt.excluded.updated_by,
            "updated_at": stmt.excluded.updated_at,
        },
    )
    await db.execute(stmt)
    logger.info("Section upserted", section_key=section_key, status=status)
    return await _reload(db, section_key)


async def replace(
    db: AsyncSession,
    section_key: str,
    *,
    content_data: dict[str, Any] | None = None,
    section_name: str | None = None,
    status: str | None = None,
    user_id: uuid.UUID | None = None,
) -> Content:
    """Replace fields of an existing section; unspecified fields keep their values."""
    record = await get_by_section_key(db, section_key, include_unpublished=True)
    if record is None:
        raise NotFoundError(f"Section '{section_key}' not found")
    if content_data is not None and not isinstance(content_data, dict):
        raise ValidationError("content_data must be an object")
    if status is not None:
        _check_status(status)

    if content_data is not None:
        record.content_data = content_data
    if section_name:
        record.section_name = section_name
    if status is not None:
        record.status = status
    record.updated_by = user_id
    record.updated_at = utcnow()
    await db.flush()
    logger.info("Section replaced", section_key=section_key)
    return record


def _postgres_path_set(segments: list[str], value: Any) -> ColumnElement[Any]:
    document = type_coerce(Content.content_data, JSONB)
    expr: ColumnElement[Any] = document
    for depth in range(1, len(segments)):
        prefix = literal(segments[:depth], ARRAY(Text))
        existing = document.op("#>")(prefix)
        container = case(
            (func.jsonb_typeof(existing) == "object", existing),
            else_=literal({}, JSONB),
        )
        expr = func.jsonb_set(expr, prefix, container, true(), type_=JSONB)
    return func.jsonb_set(
        expr,
        literal(segments, ARRAY(Text)),
        literal(value, JSONB),
        true(),
        type_=JSONB,
    )


def _sqlite_path(segments: list[str]) -> str:
    return "$" + "".join(f'."{segment}"' for segment in segments)


def _sqlite_path_set(segments: list[str], value: Any) -> ColumnElement[Any]:
    document = Content.content_data
    expr: ColumnElement[Any] = document
    for depth in range(1, len(segments)):
        prefix = _sqlite_path(segments[:depth])
        container = case(
            (func.json_type(document, prefix) == "object", func.json(func.json_extract(document, prefix))),
            else_=func.json("{}"),
        )
        expr = func.json_set(expr, prefix, container)
    return func.json_set(expr, _sqlite_path(segments), func.json(json.dumps(value)))


async def update_partial(
    db: AsyncSession,
    section_key: str,
    path: str,
    value: Any,
    *,
    user_id: uuid.UUID | None = None,
) -> Content:
    """
    Set the value at a dotted path inside a section's document.

    Missing or non-object intermediate keys become empty objects; every
    other key in the document is left exactly as stored.
    """
    segments = parse_path(path)
    if _dialect(db) == "postgresql":
        new_document = _postgres_path_set(segments, value)
    else:
        new_document = _sqlite_path_set(segments, value)

    stmt = (
        update(Content)
        .where(Content.section_key == section_key)
        .values(content_data=new_document, updated_by=user_id, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(stmt)
    if result.rowcount == 0:
        raise NotFoundError(f"Section '{section_key}' not found")

    logger.info("Section path updated", section_key=section_key, path=path)
    return await _reload(db, section_key)


async def set_status(
    db: AsyncSession,
    section_key: str,
    status: str,
    *,
    user_id: uuid.UUID | None = None,
) -> Content:
    _check_status(status)
    record = await get_by_section_key(db, section_key, include_unpublished=True)
    if record is None:
        raise NotFoundError(f"Section '{section_key}' not found")
    record.status = status
    record.updated_by = user_id
    record.updated_at = utcnow()
    await db.flush()
    logger.info("Section status changed", section_key=section_key, status=status)
    return record


async def archive(db: AsyncSession, section_key: str, *, user_id: uuid.UUID | None = None) -> Content:
    return await set_status(db, section_key, ContentStatus.ARCHIVED.value, user_id=user_id)


async def restore(db: AsyncSession, section_key: str, *, user_id: uuid.UUID | None = None) -> Content:
    return await set_status(db, section_key, ContentStatus.PUBLISHED.value, user_id=user_id)
