"""
User repository containing all data-access operations for the users table.

Repository rules:
- Pure data-access logic only
- Every function receives AsyncSession explicitly
- Functions flush, but never commit
"""

from __future__ import annotations

import uuid

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.constants import UserRole, UserStatus
from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.core.logging import get_logger
from app.core.security import hash_password, verify_password
from app.db.models.base import utcnow
from app.db.models.user import User
from app.db.session import atomic
from app.repositories.base import ListResult

logger = get_logger("repositories.users")

UPDATABLE_FIELDS = frozenset({"full_name", "phone", "avatar_url", "role"})


def _check_role(role: str) -> None:
    if role not in tuple(UserRole):
        raise ValidationError(f"Invalid role '{role}'. Allowed values: {', '.join(UserRole)}")


def _check_status(status: str) -> None:
    if status not in tuple(UserStatus):
        raise ValidationError(
            f"Invalid status '{status}'. Allowed values: {', '.join(UserStatus)}"
        )


async def create_user(
    db: AsyncSession,
    *,
    email: str,
    password: str,
    full_name: str,
    role: str = UserRole.USER.value,
    phone: str | None = None,
) -> User:
    """Create a new user with a hashed password. Existing email raises ConflictError."""
    _check_role(role)
    user = User(
        email=email.lower().strip(),
        password_hash=hash_password(password),
        full_name=full_name.strip(),
        role=role,
        phone=phone,
    )
    try:
        async with atomic(db):
            db.add(user)
            await db.flush()
    except ConflictError:
        raise ConflictError("A user with this email already exists") from None
    logger.info("User created", user_id=str(user.id), role=role)
    return user


async def get_user_by_id(db: AsyncSession, user_id: uuid.UUID) -> User | None:
    """Fetch a user by primary key."""
    return await db.get(User, user_id)


async def get_active_user_by_id(db: AsyncSession, user_id: uuid.UUID) -> User | None:
    """Fetch an active user by primary key."""
    stmt = select(User).where(User.id == user_id, User.status == UserStatus.ACTIVE.value)
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    """Fetch a user by email address (case-insensitive)."""
    stmt = select(User).where(User.email == email.lower().strip())
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def authenticate_user(
    db: AsyncSession,
    *,
    email: str,
    password: str,
) -> User | None:
    """Return the user when the password matches, whatever their status."""
    user = await get_user_by_email(db, email)
    if user is None:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


async def list_users(
    db: AsyncSession,
    *,
    status: str | None = None,
    role: str | None = None,
    offset: int = 0,
    limit: int = 50,
) -> ListResult[User]:
    """List users with optional status/role filters."""
    clauses = []
    if status is not None:
        clauses.append(User.status == status)
    if role is not None:
        clauses.append(User.role == role)

    total = (
        await db.execute(select(func.count()).select_from(User).where(*clauses))
    ).scalar_one()
    stmt = (
        select(User)
        .where(*clauses)
        .order_by(User.created_at.desc())
        .offset(offset)
        .limit(limit)
    )
    result = await db.execute(stmt)
    return ListResult(items=list(result.scalars().all()), total=total)


async def _get_for_write(db: AsyncSession, user_id: uuid.UUID) -> User:
    user = await get_user_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


async def update_user(
    db: AsyncSession,
    user_id: uuid.UUID,
    **fields: object,
) -> User:
    """Update mutable profile fields and return the updated user."""
    data = {
        key: value
        for key, value in fields.items()
        if key in UPDATABLE_FIELDS and value is not None
    }
    if not data:
        raise ValidationError("No valid fields to update")
    if "role" in data:
        _check_role(str(data["role"]))

    user = await _get_for_write(db, user_id)
    for key, value in data.items():
        setattr(user, key, value)
    user.updated_at = utcnow()
    await db.flush()
    logger.info("User updated", user_id=str(user_id), fields=sorted(data))
    return user


async def update_password(
    db: AsyncSession,
    user_id: uuid.UUID,
    new_password: str,
) -> None:
    """Replace a user's password hash."""
    user = await _get_for_write(db, user_id)
    user.password_hash = hash_password(new_password)
    user.updated_at = utcnow()
    await db.flush()
    logger.info("Password changed", user_id=str(user_id))


async def change_status(
    db: AsyncSession,
    user_id: uuid.UUID,
    status: str,
) -> User:
    """Activate, deactivate or suspend a user; takes effect on their next request."""
    _check_status(status)
    user = await _get_for_write(db, user_id)
    user.status = status
    user.updated_at = utcnow()
    await db.flush()
    logger.info("User status changed", user_id=str(user_id), status=status)
    return user


async def record_login(db: AsyncSession, user_id: uuid.UUID) -> None:
    """Stamp last_login on successful authentication."""
    stmt = (
        update(User)
        .where(User.id == user_id)
        .values(last_login=utcnow())
    )
    await db.execute(stmt)
    await db.flush()
