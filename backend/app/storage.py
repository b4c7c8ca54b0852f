"""
Local file storage for uploads.

Files land in `UPLOAD_DIR/<category>/<timestamp>-<random>-<slug><ext>`,
where the category folder is derived from the MIME type.
"""

from __future__ import annotations

import os
import re
import secrets
import time
from pathlib import Path

from fastapi import UploadFile

from app.core.config import settings
from app.core.constants import (
    ALLOWED_UPLOAD_EXTENSIONS,
    ALLOWED_UPLOAD_MIME_TYPES,
    UploadCategory,
)
from app.core.errors import ValidationError
from app.core.logging import get_logger

logger = get_logger("storage")

READ_CHUNK_BYTES = 1024 * 1024


def category_for(mime_type: str) -> UploadCategory:
    """Storage folder for a MIME type."""
    if mime_type.startswith("image/"):
        return UploadCategory.IMAGENES
    if mime_type.startswith("audio/"):
        return UploadCategory.AUDIO
    if mime_type.startswith("video/"):
        return UploadCategory.VIDEO
    if mime_type.startswith("application/"):
        return UploadCategory.DOCUMENTOS
    return UploadCategory.OTROS


def check_type(filename: str, mime_type: str) -> None:
    """Reject files whose extension or MIME type is not allowed."""
    extension = Path(filename or "").suffix.lower()
    if extension not in ALLOWED_UPLOAD_EXTENSIONS or mime_type not in ALLOWED_UPLOAD_MIME_TYPES:
        raise ValidationError(
            f"File type not allowed: {filename}",
            details={"allowed": sorted(ALLOWED_UPLOAD_EXTENSIONS)},
        )


def _too_large(filename: str) -> ValidationError:
    return ValidationError(
        f"File too large: {filename}",
        details={"max_bytes": settings.UPLOAD_MAX_BYTES},
    )


def check_size(filename: str, size: int) -> None:
    if size > settings.UPLOAD_MAX_BYTES:
        raise _too_large(filename)
    if size == 0:
        raise ValidationError(f"File is empty: {filename}")


def validate_upload(filename: str, mime_type: str, size: int) -> None:
    """Reject files with a disallowed extension/MIME type or over the size limit."""
    check_type(filename, mime_type)
    check_size(filename, size)


async def read_upload(file: UploadFile) -> bytes:
    """
    Read an uploaded file in chunks.

    Stops with a ValidationError as soon as more than `UPLOAD_MAX_BYTES`
    arrive, so oversized bodies are never held in memory whole.
    """
    filename = file.filename or "file"
    if file.size is not None and file.size > settings.UPLOAD_MAX_BYTES:
        raise _too_large(filename)

    chunks: list[bytes] = []
    received = 0
    while True:
        chunk = await file.read(READ_CHUNK_BYTES)
        if not chunk:
            break
        received += len(chunk)
        if received > settings.UPLOAD_MAX_BYTES:
            raise _too_large(filename)
        chunks.append(chunk)
    return b"".join(chunks)


def build_filename(original: str) -> str:
    """Unique, filesystem-safe name that keeps a slug of the original."""
    path = Path(original)
    slug = re.sub(r"[^a-z0-9]+", "-", path.stem.lower()).strip("-")[:50] or "file"
    return f"{int(time.time() * 1000)}-{secrets.token_hex(4)}-{slug}{path.suffix.lower()}"


def save_file(data: bytes, category: str, filename: str) -> Path:
    """Write bytes under the category folder and return the absolute path."""
    folder = Path(settings.UPLOAD_DIR) / category
    folder.mkdir(parents=True, exist_ok=True)
    target = folder / filename
    target.write_bytes(data)
    logger.info("File stored", path=str(target), size=len(data))
    return target.resolve()


def public_url(category: str, filename: str) -> str:
    return f"{settings.UPLOAD_PUBLIC_PREFIX}/{category}/{filename}"


def delete_file(file_path: str) -> bool:
    """Remove a stored file. Returns False when it was already gone."""
    try:
        os.remove(file_path)
    except FileNotFoundError:
        logger.warning("File already removed", path=file_path)
        return False
    logger.info("File removed", path=file_path)
    return True
