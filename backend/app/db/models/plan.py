"""
Plan model — pricing plans. At most one row may be featured.
"""

import uuid
from typing import Any, Optional

from sqlalchemy import Boolean, ForeignKey, Index, Integer, Numeric, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.models.base import Base, JSONDocument, TimestampMixin, UUIDPrimaryKeyMixin


class Plan(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "plans"
    __table_args__ = (
        Index(
            "uq_plans_single_featured",
            "is_featured",
            unique=True,
            postgresql_where=text("is_featured"),
            sqlite_where=text("is_featured = 1"),
        ),
    )

    plan_id: Mapped[str] = mapped_column(
        String(100), unique=True, nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False)
    price_currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    billing_period: Mapped[str] = mapped_column(String(50), nullable=False, default="mes")
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    features: Mapped[list[Any]] = mapped_column(JSONDocument, nullable=False, default=list)
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    cta_text: Mapped[str] = mapped_column(
        String(100), nullable=False, default="Comenzar Ahora"
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="active"
    )  # active | inactive
    created_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    def __repr__(self) -> str:
        return f"<Plan {self.plan_id} featured={self.is_featured} status={self.status}>"
