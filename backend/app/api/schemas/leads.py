"""Lead capture and CRM schemas."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.core.constants import EMAIL_PATTERN, LeadStatus


class LeadCreate(BaseModel):
    """Public contact form. Presence of required fields is checked by the route."""

    nombre: str | None = Field(default=None, max_length=255)
    email: str | None = Field(default=None, max_length=320)
    telefono: str | None = Field(default=None, max_length=50)
    empresa: str | None = Field(default=None, max_length=255)
    servicio_interes: str | None = Field(default=None, max_length=255)
    presupuesto: str | None = Field(default=None, max_length=100)
    mensaje: str | None = None
    origen: str | None = Field(default=None, max_length=100)


class LeadUpdate(BaseModel):
    nombre: str | None = Field(default=None, min_length=1, max_length=255)
    email: str | None = Field(default=None, max_length=320, pattern=EMAIL_PATTERN)
    telefono: str | None = Field(default=None, max_length=50)
    empresa: str | None = Field(default=None, max_length=255)
    servicio_interes: str | None = Field(default=None, max_length=255)
    presupuesto: str | None = Field(default=None, max_length=100)
    mensaje: str | None = None
    estado: LeadStatus | None = None


class LeadEstadoRequest(BaseModel):
    estado: str = Field(..., min_length=1)


class LeadAssignRequest(BaseModel):
    user_id: uuid.UUID | None = None


class LeadResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    nombre: str
    email: str
    telefono: str
    empresa: str | None
    servicio_interes: str
    presupuesto: str | None
    mensaje: str | None
    origen: str
    estado: LeadStatus
    fecha: datetime
    assigned_to: uuid.UUID | None
    created_at: datetime
    updated_at: datetime
