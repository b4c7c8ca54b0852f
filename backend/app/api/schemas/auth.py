"""Authentication and user request/response schemas."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.core.constants import EMAIL_PATTERN, UserRole, UserStatus


class LoginRequest(BaseModel):
    """Request payload for login endpoint."""

    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=1, max_length=256)


class RegisterRequest(BaseModel):
    """Admin-only account creation."""

    email: str = Field(..., max_length=320, pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=8, max_length=256)
    full_name: str = Field(..., min_length=1, max_length=255)
    role: UserRole = UserRole.USER
    phone: str | None = Field(default=None, max_length=50)


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1, max_length=256)
    new_password: str = Field(..., min_length=8, max_length=256)


class ResetPasswordRequest(BaseModel):
    new_password: str = Field(..., min_length=8, max_length=256)


class UserResponse(BaseModel):
    """Public user profile; never carries the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    full_name: str
    role: UserRole
    status: UserStatus
    phone: str | None
    avatar_url: str | None
    created_at: datetime
    updated_at: datetime
    last_login: datetime | None


class TokenResponse(BaseModel):
    """Bearer access token plus the authenticated user."""

    token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., ge=1)
    user: UserResponse


class UserUpdateRequest(BaseModel):
    full_name: str | None = Field(default=None, min_length=1, max_length=255)
    phone: str | None = Field(default=None, max_length=50)
    avatar_url: str | None = None
    role: UserRole | None = None


class UserStatusRequest(BaseModel):
    status: UserStatus
