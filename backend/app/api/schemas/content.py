"""Content section schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ContentUpsert(BaseModel):
    section_key: str = Field(..., min_length=1, max_length=100)
    section_name: str | None = Field(default=None, max_length=255)
    content_data: dict[str, Any]
    status: str = "published"


class ContentReplace(BaseModel):
    section_name: str | None = Field(default=None, max_length=255)
    content_data: dict[str, Any] | None = None
    status: str | None = None


class ContentPartialUpdate(BaseModel):
    path: str = Field(..., min_length=1)
    value: Any = None


class ContentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    section_key: str
    section_name: str
    content_data: dict[str, Any]
    status: str
    created_by: uuid.UUID | None
    updated_by: uuid.UUID | None
    created_at: datetime
    updated_at: datetime
