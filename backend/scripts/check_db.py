"""
Verify database connectivity and report row counts per table.
Run: python -m scripts.check_db  (from backend/)
"""

import asyncio
import sys

from sqlalchemy import func, select
from sqlalchemy.exc import DBAPIError

from app.core.config import settings
from app.db.models import Base
from app.db.session import async_session, check_connection, engine


async def check_db() -> bool:
    print(f"  Host     : {settings.POSTGRES_SERVER}:{settings.POSTGRES_PORT}")
    print(f"  Database : {settings.POSTGRES_DB}")
    print(f"  User     : {settings.POSTGRES_USER}")

    ok = await check_connection()
    if not ok:
        print("  Connection failed")
        await engine.dispose()
        return False

    print("  Connection OK")
    async with async_session() as session:
        for table in Base.metadata.sorted_tables:
            try:
                count = await session.scalar(select(func.count()).select_from(table))
            except DBAPIError:
                await session.rollback()
                print(f"  {table.name:<12} : missing (run init-db)")
                continue
            print(f"  {table.name:<12} : {count}")
    await engine.dispose()
    return True


def main() -> None:
    ok = asyncio.run(check_db())
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
