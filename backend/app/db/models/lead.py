"""
Lead model — contact-form submissions tracked through the sales pipeline.

`estado` moves freely between nuevo, contactado, calificado and cerrado.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.db.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin, utcnow


class Lead(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "leads"

    nombre: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    telefono: Mapped[str] = mapped_column(String(50), nullable=False)
    empresa: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    servicio_interes: Mapped[str] = mapped_column(String(255), nullable=False)
    presupuesto: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    mensaje: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    origen: Mapped[str] = mapped_column(
        String(100), nullable=False, default="formulario-web"
    )
    estado: Mapped[str] = mapped_column(
        String(20), nullable=False, default="nuevo", index=True
    )
    fecha: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )
    assigned_to: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    def __repr__(self) -> str:
        return f"<Lead id={self.id} {self.email} estado={self.estado}>"
