"""Authentication endpoints: login, registration, passwords and token refresh."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_db, require_roles
from app.api.pagination import ok, serialize
from app.api.schemas.auth import (
    ChangePasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    TokenResponse,
    UserResponse,
)
from app.core.config import settings
from app.core.constants import ADMINS
from app.core.errors import AuthenticationError, InvalidCredentialsError, NotFoundError
from app.core.logging import get_logger
from app.core.security import create_access_token
from app.db.models.user import User
from app.repositories import users as user_repository

router = APIRouter(prefix="/auth", tags=["Auth"])
logger = get_logger("api.auth")


def _issue_token(user: User) -> dict[str, object]:
    access_token = create_access_token(
        {
            "sub": str(user.id),
            "role": user.role,
            "email": user.email,
        }
    )
    return TokenResponse(
        token=access_token,
        expires_in=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        user=UserResponse.model_validate(user),
    ).model_dump(mode="json")


@router.post("/login")
async def login(payload: LoginRequest, db: AsyncSession = Depends(get_db)) -> dict[str, object]:
    """Authenticate a user and issue an access token."""
    user = await user_repository.authenticate_user(
        db,
        email=payload.email,
        password=payload.password,
    )
    if user is None:
        logger.warning("Login failed", email=payload.email.lower().strip())
        raise InvalidCredentialsError("Invalid credentials")
    if not user.is_active:
        logger.warning("Login refused for inactive user", user_id=str(user.id), status=user.status)
        raise AuthenticationError("User account is not active")

    await user_repository.record_login(db, user.id)
    logger.info("Login succeeded", user_id=str(user.id), role=user.role)
    return ok(_issue_token(user), message="Login successful")


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    payload: RegisterRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_roles(ADMINS)),
) -> dict[str, object]:
    """Create a back-office account (admin only)."""
    user = await user_repository.create_user(
        db,
        email=payload.email,
        password=payload.password,
        full_name=payload.full_name,
        role=payload.role.value,
        phone=payload.phone,
    )
    logger.info("User registered", user_id=str(user.id), by=str(current_user.id))
    return ok(serialize(UserResponse, user), message="User created")


@router.get("/me")
async def read_current_user(current_user: User = Depends(get_current_user)) -> dict[str, object]:
    """Return the currently authenticated active user."""
    return ok(serialize(UserResponse, current_user))


@router.put("/change-password")
async def change_password(
    payload: ChangePasswordRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict[str, object]:
    """Change the caller's own password after re-checking the current one."""
    user = await user_repository.authenticate_user(
        db, email=current_user.email, password=payload.current_password
    )
    if user is None:
        raise InvalidCredentialsError("Current password is incorrect")
    await user_repository.update_password(db, current_user.id, payload.new_password)
    return ok(message="Password updated")


@router.post("/reset-password/{user_id}")
async def reset_password(
    user_id: uuid.UUID,
    payload: ResetPasswordRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_roles(ADMINS)),
) -> dict[str, object]:
    """Set another user's password (admin only)."""
    if await user_repository.get_user_by_id(db, user_id) is None:
        raise NotFoundError("User not found")
    await user_repository.update_password(db, user_id, payload.new_password)
    logger.info("Password reset", user_id=str(user_id), by=str(current_user.id))
    return ok(message="Password reset")


@router.post("/refresh")
async def refresh_token(current_user: User = Depends(get_current_user)) -> dict[str, object]:
    """Issue a fresh token for a user who is still active."""
    return ok(_issue_token(current_user))


@router.post("/logout")
async def logout(current_user: User = Depends(get_current_user)) -> dict[str, object]:
    """Tokens are stateless; the client discards its copy."""
    logger.info("Logout", user_id=str(current_user.id))
    return ok(message="Logged out")
