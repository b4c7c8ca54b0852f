"""Website content sections: public reads, editor upserts and path updates."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, get_optional_user, require_roles
from app.api.pagination import ok, serialize
from app.api.schemas.content import (
    ContentPartialUpdate,
    ContentReplace,
    ContentResponse,
    ContentUpsert,
)
from app.core.constants import EDITORS, ContentStatus
from app.core.errors import NotFoundError
from app.db.models.user import User
from app.repositories import content as content_repository

router = APIRouter(prefix="/content", tags=["Content"])


@router.get("")
async def list_sections(
    status_filter: str | None = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
    user: User | None = Depends(get_optional_user),
) -> dict[str, object]:
    """Anonymous callers only ever see published sections."""
    effective = status_filter if user is not None else ContentStatus.PUBLISHED.value
    sections = await content_repository.list_sections(db, status=effective)
    return ok(serialize(ContentResponse, sections))


@router.get("/{section_key}")
async def get_section(section_key: str, db: AsyncSession = Depends(get_db)) -> dict[str, object]:
    section = await content_repository.get_by_section_key(db, section_key)
    if section is None:
        raise NotFoundError("Section not found")
    return ok(serialize(ContentResponse, section))


@router.post("", status_code=status.HTTP_201_CREATED)
async def upsert_section(
    payload: ContentUpsert,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_roles(EDITORS)),
) -> dict[str, object]:
    section = await content_repository.upsert(
        db,
        section_key=payload.section_key,
        section_name=payload.section_name,
        content_data=payload.content_data,
        status=payload.status,
        user_id=current_user.id,
    )
    return ok(serialize(ContentResponse, section), message="Section saved")


@router.put("/{section_key}")
async def replace_section(
    section_key: str,
    payload: ContentReplace,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_roles(EDITORS)),
) -> dict[str, object]:
    section = await content_repository.replace(
        db,
        section_key,
        content_data=payload.content_data,
        section_name=payload.section_name,
        status=payload.status,
        user_id=current_user.id,
    )
    return ok(serialize(ContentResponse, section), message="Section updated")


@router.patch("/{section_key}/partial")
async def update_section_path(
    section_key: str,
    payload: ContentPartialUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_roles(EDITORS)),
) -> dict[str, object]:
    """Set one nested value, e.g. `{"path": "hero.titulo", "value": "..."}`."""
    section = await content_repository.update_partial(
        db, section_key, payload.path, payload.value, user_id=current_user.id
    )
    return ok(serialize(ContentResponse, section), message="Section updated")


@router.delete("/{section_key}")
async def archive_section(
    section_key: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_roles(EDITORS)),
) -> dict[str, object]:
    section = await content_repository.archive(db, section_key, user_id=current_user.id)
    return ok(serialize(ContentResponse, section), message="Section archived")


@router.post("/{section_key}/restore")
async def restore_section(
    section_key: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_roles(EDITORS)),
) -> dict[str, object]:
    section = await content_repository.restore(db, section_key, user_id=current_user.id)
    return ok(serialize(ContentResponse, section), message="Section restored")
