"""Shared dependencies for API routes: DB session, identity and role gates."""

from __future__ import annotations

import uuid
from typing import Any, AsyncGenerator, Callable, Iterable

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import AuthenticationError, AuthorizationError, MissingCredentialsError
from app.core.security import decode_access_token
from app.db.models.user import User
from app.db.session import get_db as _get_db
from app.repositories import users as user_repository

security_scheme = HTTPBearer(auto_error=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async DB session."""
    async for session in _get_db():
        yield session


async def get_current_token_payload(
    credentials: HTTPAuthorizationCredentials | None = Depends(security_scheme),
) -> dict[str, Any]:
    """Extract and validate JWT payload from bearer token."""
    if credentials is None:
        raise MissingCredentialsError("Authentication credentials were not provided")

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise AuthenticationError("Invalid or expired token")
    return payload


async def _resolve_user(db: AsyncSession, payload: dict[str, Any]) -> User | None:
    try:
        user_id = uuid.UUID(str(payload.get("sub")))
    except ValueError:
        return None
    return await user_repository.get_active_user_by_id(db, user_id)


async def get_current_user(
    db: AsyncSession = Depends(get_db),
    token_payload: dict[str, Any] = Depends(get_current_token_payload),
) -> User:
    """Re-resolve the token subject against the live users table on every request."""
    user = await _resolve_user(db, token_payload)
    if user is None:
        raise AuthenticationError("Invalid or inactive user")
    return user


async def get_optional_user(
    db: AsyncSession = Depends(get_db),
    credentials: HTTPAuthorizationCredentials | None = Depends(security_scheme),
) -> User | None:
    """Identity when a valid credential is present; never fails the request."""
    if credentials is None:
        return None
    payload = decode_access_token(credentials.credentials)
    if payload is None:
        return None
    return await _resolve_user(db, payload)


def require_roles(roles: Iterable[str]) -> Callable[..., Any]:
    """Build a dependency that admits only users whose role is in `roles`."""
    allowed = frozenset(str(role) for role in roles)

    async def _check_role(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            raise AuthorizationError("You do not have permission to perform this action")
        return current_user

    return _check_role
