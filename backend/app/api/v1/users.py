"""Back-office user administration (admin only)."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, require_roles
from app.api.pagination import normalize_pagination, ok, paginated, serialize
from app.api.schemas.auth import UserResponse, UserStatusRequest, UserUpdateRequest
from app.core.constants import ADMINS, UserRole, UserStatus
from app.core.errors import NotFoundError, ValidationError
from app.db.models.user import User
from app.repositories import users as user_repository

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    dependencies=[Depends(require_roles(ADMINS))],
)


@router.get("")
async def list_users(
    role: UserRole | None = None,
    status: UserStatus | None = None,
    page: int = Query(1),
    limit: int = Query(20),
    db: AsyncSession = Depends(get_db),
) -> dict[str, object]:
    spec = normalize_pagination(page, limit)
    result = await user_repository.list_users(
        db,
        role=role.value if role else None,
        status=status.value if status else None,
        offset=spec.offset,
        limit=spec.limit,
    )
    return paginated(UserResponse, result.items, result.total, spec)


@router.get("/{user_id}")
async def get_user(user_id: uuid.UUID, db: AsyncSession = Depends(get_db)) -> dict[str, object]:
    user = await user_repository.get_user_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return ok(serialize(UserResponse, user))


@router.put("/{user_id}")
async def update_user(
    user_id: uuid.UUID,
    payload: UserUpdateRequest,
    db: AsyncSession = Depends(get_db),
) -> dict[str, object]:
    user = await user_repository.update_user(db, user_id, **payload.model_dump(exclude_unset=True))
    return ok(serialize(UserResponse, user), message="User updated")


@router.patch("/{user_id}/status")
async def change_user_status(
    user_id: uuid.UUID,
    payload: UserStatusRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_roles(ADMINS)),
) -> dict[str, object]:
    """Revoke or restore access; effective on the user's next request."""
    if user_id == current_user.id and payload.status != UserStatus.ACTIVE:
        raise ValidationError("You cannot deactivate your own account")
    user = await user_repository.change_status(db, user_id, payload.status.value)
    return ok(serialize(UserResponse, user), message="Status updated")


@router.delete("/{user_id}")
async def deactivate_user(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_roles(ADMINS)),
) -> dict[str, object]:
    """Soft delete: the account becomes inactive."""
    if user_id == current_user.id:
        raise ValidationError("You cannot deactivate your own account")
    user = await user_repository.change_status(db, user_id, UserStatus.INACTIVE.value)
    return ok(serialize(UserResponse, user), message="User deactivated")
