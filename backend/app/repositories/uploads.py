"""
Upload repository — metadata rows for stored files.
"""

from __future__ import annotations

import uuid
from datetime import timedelta
from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFoundError, ValidationError
from app.core.logging import get_logger
from app.db.models.base import utcnow
from app.db.models.upload import Upload
from app.repositories.base import LIKE_ESCAPE, ListResult, escape_like

logger = get_logger("repositories.uploads")

UPDATABLE_FIELDS = frozenset({"alt_text", "caption", "folder"})
SORT_FIELDS = {
    "created_at": Upload.created_at,
    "file_size": Upload.file_size,
    "filename": Upload.filename,
    "mime_type": Upload.mime_type,
}


async def create_upload(db: AsyncSession, **fields: Any) -> Upload:
    upload = Upload(**fields)
    db.add(upload)
    await db.flush()
    logger.info("Upload recorded", upload_id=str(upload.id), filename=upload.filename)
    return upload


async def get_upload(db: AsyncSession, upload_id: uuid.UUID) -> Upload | None:
    return await db.get(Upload, upload_id)


async def list_uploads(
    db: AsyncSession,
    *,
    folder: str | None = None,
    search: str | None = None,
    sort_by: str = "created_at",
    descending: bool = True,
    offset: int = 0,
    limit: int = 20,
) -> ListResult[Upload]:
    """Filtered, sorted page of uploads."""
    if sort_by not in SORT_FIELDS:
        raise ValidationError(
            f"Invalid sort field '{sort_by}'. Allowed values: {', '.join(SORT_FIELDS)}"
        )
    clauses = []
    if folder:
        clauses.append(Upload.folder == folder)
    if search:
        pattern = f"%{escape_like(search)}%"
        clauses.append(
            or_(
                Upload.original_filename.ilike(pattern, escape=LIKE_ESCAPE),
                Upload.alt_text.ilike(pattern, escape=LIKE_ESCAPE),
                Upload.caption.ilike(pattern, escape=LIKE_ESCAPE),
            )
        )

    total = (
        await db.execute(select(func.count()).select_from(Upload).where(*clauses))
    ).scalar_one()
    column = SORT_FIELDS[sort_by]
    stmt = (
        select(Upload)
        .where(*clauses)
        .order_by(column.desc() if descending else column.asc())
        .offset(offset)
        .limit(limit)
    )
    items = list((await db.execute(stmt)).scalars().all())
    return ListResult(items=items, total=total)


async def update_upload(db: AsyncSession, upload_id: uuid.UUID, fields: dict[str, Any]) -> Upload:
    data = {key: value for key, value in fields.items() if key in UPDATABLE_FIELDS}
    if not data:
        raise ValidationError("No valid fields to update")
    upload = await get_upload(db, upload_id)
    if upload is None:
        raise NotFoundError("File not found")
    for key, value in data.items():
        setattr(upload, key, value)
    upload.updated_at = utcnow()
    await db.flush()
    return upload


async def delete_upload(db: AsyncSession, upload_id: uuid.UUID) -> Upload:
    """Delete the metadata row and return it so the caller can remove the file."""
    upload = await get_upload(db, upload_id)
    if upload is None:
        raise NotFoundError("File not found")
    await db.delete(upload)
    await db.flush()
    logger.warning("Upload deleted", upload_id=str(upload_id), filename=upload.filename)
    return upload


def _extension(name: str) -> str:
    return name.rsplit(".", 1)[-1].lower() if "." in name else ""


async def get_stats(db: AsyncSession) -> dict[str, Any]:
    """Totals, recent activity and breakdowns by folder and extension."""
    total, total_size, avg_size = (
        await db.execute(
            select(
                func.count(),
                func.coalesce(func.sum(Upload.file_size), 0),
                func.coalesce(func.avg(Upload.file_size), 0),
            )
        )
    ).one()
    recent = (
        await db.execute(
            select(func.count()).where(Upload.created_at >= utcnow() - timedelta(days=7))
        )
    ).scalar_one()
    by_folder = (
        await db.execute(
            select(Upload.folder, func.count(), func.coalesce(func.sum(Upload.file_size), 0))
            .group_by(Upload.folder)
            .order_by(Upload.folder)
        )
    ).all()

    by_extension: dict[str, int] = {}
    for (filename,) in (await db.execute(select(Upload.filename))).all():
        extension = _extension(filename)
        by_extension[extension] = by_extension.get(extension, 0) + 1

    return {
        "total": total,
        "total_size": int(total_size),
        "avg_size": round(float(avg_size), 2),
        "recent": recent,
        "por_folder": [
            {"folder": folder, "count": count, "size": int(size)}
            for folder, count, size in by_folder
        ],
        "por_extension": by_extension,
    }
