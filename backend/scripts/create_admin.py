"""
Create (or promote) a back-office admin account.
Run: python -m scripts.create_admin --email=admin@example.com --password=... --name="Admin"  (from backend/)
"""

import argparse
import asyncio

from app.core.constants import UserRole, UserStatus
from app.core.errors import ValidationError
from app.db.session import async_session
from app.repositories.users import change_status, create_user, get_user_by_email, update_user


async def create_admin(email: str, password: str, full_name: str) -> str:
    """Insert the admin, or re-activate and promote an existing account."""
    if len(password) < 8:
        raise ValidationError("Password must be at least 8 characters")
    async with async_session() as session:
        user = await get_user_by_email(session, email)
        if user is None:
            user = await create_user(
                session,
                email=email,
                password=password,
                full_name=full_name,
                role=UserRole.ADMIN.value,
            )
            action = "Created"
        else:
            await update_user(session, user.id, role=UserRole.ADMIN.value)
            await change_status(session, user.id, UserStatus.ACTIVE.value)
            action = "Promoted"
        await session.commit()
    print(f"  {action} admin: {user.email}")
    return str(user.id)


def main() -> None:
    parser = argparse.ArgumentParser(description="Create a back-office admin user")
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", required=True)
    parser.add_argument("--name", default="Administrador")
    args = parser.parse_args()
    asyncio.run(create_admin(args.email, args.password, args.name))


if __name__ == "__main__":
    main()
