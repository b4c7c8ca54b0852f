"""Upload metadata schemas."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.core.constants import UploadCategory


class UploadUpdate(BaseModel):
    alt_text: str | None = None
    caption: str | None = None
    folder: UploadCategory | None = None


class UploadResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    filename: str
    original_filename: str
    file_url: str
    mime_type: str
    file_size: int = Field(..., ge=0)
    width: int | None
    height: int | None
    alt_text: str | None
    caption: str | None
    folder: str
    uploaded_by: uuid.UUID | None
    created_at: datetime
    updated_at: datetime
