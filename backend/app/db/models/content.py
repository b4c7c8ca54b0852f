"""
Content model — one editable JSON document per website section.

`section_key` is unique; writes are upserts keyed on it.
"""

import uuid
from typing import Any, Optional

from sqlalchemy import ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.db.models.base import Base, JSONDocument, TimestampMixin, UUIDPrimaryKeyMixin


class Content(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "content"

    section_key: Mapped[str] = mapped_column(
        String(100), unique=True, nullable=False, index=True
    )
    section_name: Mapped[str] = mapped_column(String(255), nullable=False)
    content_data: Mapped[dict[str, Any]] = mapped_column(
        JSONDocument, nullable=False, default=dict
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="published"
    )  # draft | published | archived
    created_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    updated_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    def __repr__(self) -> str:
        return f"<Content {self.section_key} status={self.status}>"
