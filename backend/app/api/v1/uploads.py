"""File upload endpoints: store files on disk and keep their metadata."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from app import storage
from app.api.deps import get_db, require_roles
from app.api.pagination import normalize_pagination, ok, paginated, serialize
from app.api.schemas.uploads import UploadResponse, UploadUpdate
from app.core.config import settings
from app.core.constants import ADMINS, EDITORS, UploadCategory
from app.core.errors import NotFoundError, ValidationError
from app.core.logging import get_logger
from app.db.models.upload import Upload
from app.db.models.user import User
from app.repositories import uploads as upload_repository

router = APIRouter(prefix="/upload", tags=["Uploads"])
logger = get_logger("api.uploads")


async def _store(
    db: AsyncSession,
    file: UploadFile,
    *,
    user: User,
    alt_text: str | None,
    caption: str | None,
    folder: str | None,
) -> Upload:
    mime_type = file.content_type or "application/octet-stream"
    original = file.filename or "file"
    storage.check_type(original, mime_type)
    data = await storage.read_upload(file)
    storage.check_size(original, len(data))

    category = storage.category_for(mime_type)
    filename = storage.build_filename(original)
    path = await run_in_threadpool(storage.save_file, data, category.value, filename)
    try:
        return await upload_repository.create_upload(
            db,
            filename=filename,
            original_filename=original,
            file_path=str(path),
            file_url=storage.public_url(category.value, filename),
            mime_type=mime_type,
            file_size=len(data),
            alt_text=alt_text,
            caption=caption,
            folder=folder or category.value,
            uploaded_by=user.id,
        )
    except Exception:
        await run_in_threadpool(storage.delete_file, str(path))
        raise


def _check_folder(folder: str | None) -> None:
    if folder and folder not in tuple(UploadCategory):
        raise ValidationError(f"Invalid folder '{folder}'")


@router.post("", status_code=status.HTTP_201_CREATED)
async def upload_file(
    file: UploadFile = File(...),
    alt_text: str | None = Form(None),
    caption: str | None = Form(None),
    folder: str | None = Form(None),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_roles(EDITORS)),
) -> dict[str, object]:
    _check_folder(folder)
    upload = await _store(
        db, file, user=current_user, alt_text=alt_text, caption=caption, folder=folder
    )
    return ok(serialize(UploadResponse, upload), message="File uploaded")


@router.post("/multiple", status_code=status.HTTP_201_CREATED)
async def upload_files(
    files: list[UploadFile] = File(...),
    folder: str | None = Form(None),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_roles(EDITORS)),
) -> dict[str, object]:
    _check_folder(folder)
    if len(files) > settings.UPLOAD_MAX_FILES:
        raise ValidationError(f"At most {settings.UPLOAD_MAX_FILES} files per request")
    uploads = [
        await _store(db, file, user=current_user, alt_text=None, caption=None, folder=folder)
        for file in files
    ]
    return ok(serialize(UploadResponse, uploads), message=f"{len(uploads)} files uploaded")


@router.get("/list")
async def list_files(
    folder: str | None = None,
    search: str | None = None,
    sort_by: str = Query("created_at", alias="sortBy"),
    order: str = Query("desc"),
    page: int = Query(1),
    limit: int = Query(20),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_roles(EDITORS)),
) -> dict[str, object]:
    spec = normalize_pagination(page, limit)
    result = await upload_repository.list_uploads(
        db,
        folder=folder,
        search=search,
        sort_by=sort_by,
        descending=order.lower() != "asc",
        offset=spec.offset,
        limit=spec.limit,
    )
    return paginated(UploadResponse, result.items, result.total, spec)


@router.get("/stats")
async def upload_stats(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_roles(EDITORS)),
) -> dict[str, object]:
    return ok(await upload_repository.get_stats(db))


@router.get("/{upload_id}")
async def get_file(
    upload_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_roles(EDITORS)),
) -> dict[str, object]:
    upload = await upload_repository.get_upload(db, upload_id)
    if upload is None:
        raise NotFoundError("File not found")
    return ok(serialize(UploadResponse, upload))


@router.put("/{upload_id}")
async def update_file(
    upload_id: uuid.UUID,
    payload: UploadUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_roles(EDITORS)),
) -> dict[str, object]:
    upload = await upload_repository.update_upload(db, upload_id, payload.model_dump(exclude_unset=True))
    return ok(serialize(UploadResponse, upload), message="File updated")


@router.delete("/{upload_id}")
async def delete_file(
    upload_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_roles(ADMINS)),
) -> dict[str, object]:
    upload = await upload_repository.delete_upload(db, upload_id)
    await run_in_threadpool(storage.delete_file, upload.file_path)
    return ok(message="File deleted")
