"""
Import the legacy JSON documents into the database.
Run: python -m scripts.migrate_legacy --dir=content/formularios --admin-email=... --admin-password=...  (from backend/)
"""

import argparse
import asyncio

from app.core.config import settings
from app.core.logging import setup_logging
from app.db.session import async_session
from app.legacy_import import run_import


async def migrate(directory: str, admin_email: str, admin_password: str) -> None:
    async with async_session() as session:
        try:
            report = await run_import(
                session,
                directory,
                admin_email=admin_email,
                admin_password=admin_password,
            )
            await session.commit()
        except Exception:
            await session.rollback()
            raise

    print("Migration summary:")
    for step, count in sorted(report.counts.items()):
        print(f"  {step:<12} : {count}")
    if report.skipped:
        print(f"  skipped      : {', '.join(report.skipped)}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Import legacy JSON content")
    parser.add_argument("--dir", default=settings.LEGACY_DATA_DIR)
    parser.add_argument("--admin-email", required=True)
    parser.add_argument("--admin-password", required=True)
    args = parser.parse_args()
    setup_logging(settings.LOG_LEVEL)
    asyncio.run(migrate(args.dir, args.admin_email, args.admin_password))


if __name__ == "__main__":
    main()
