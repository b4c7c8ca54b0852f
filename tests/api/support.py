# Shared helpers for API endpoint tests.
# Users are committed through their own short-lived session so request
# sessions opened by the app see them on the shared in-memory connection.

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.constants import UserRole, UserStatus
from app.core.security import create_access_token
from app.db.models.user import User
from app.repositories import users as user_repository

DEFAULT_PASSWORD = "boost-secret-1"


async def create_user(
    session_factory: async_sessionmaker[AsyncSession],
    *,
    email: str,
    role: str = UserRole.USER,
    status: str = UserStatus.ACTIVE,
    password: str = DEFAULT_PASSWORD,
    full_name: str = "Test User",
) -> User:
    async with session_factory() as session:
        user = await user_repository.create_user(
            session,
            email=email,
            password=password,
            full_name=full_name,
            role=str(role),
        )
        if status != UserStatus.ACTIVE:
            await user_repository.change_status(session, user.id, str(status))
        await session.commit()
    return user


async def set_user_status(
    session_factory: async_sessionmaker[AsyncSession],
    user: User,
    status: str,
) -> None:
    async with session_factory() as session:
        await user_repository.change_status(session, user.id, str(status))
        await session.commit()


def auth_headers(user: User, **claims: Any) -> dict[str, str]:
    token = create_access_token({"sub": str(user.id), "role": user.role, **claims})
    return {"Authorization": f"Bearer {token}"}


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


LEAD_FORM = {
    "nombre": "Laura Gómez",
    "email": "laura@example.com",
    "telefono": "+57 300 000 0000",
    "empresa": "Café Andino",
    "servicio_interes": "marketing-digital",
    "presupuesto": "1000-3000",
    "mensaje": "Quiero mejorar mis redes sociales",
}
