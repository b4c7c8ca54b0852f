"""
Alembic migration environment; reads the database location from app settings.

Migrations run on a SYNC engine (psycopg2) while the app uses asyncpg at
runtime. A SQLite `DATABASE_URL_OVERRIDE` is honoured too, with batch mode
so ALTERs work there.
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

from app.core.config import settings
from app.db.models import Base  # noqa: F401 (imports all models via __init__.py)

config = context.config


def _sync_url() -> str:
    override = settings.DATABASE_URL_OVERRIDE
    if override.startswith("sqlite"):
        return override.replace("+aiosqlite", "")
    return settings.DATABASE_URL_SYNC


sync_url = _sync_url()
config.set_main_option("sqlalchemy.url", sync_url)
render_as_batch = sync_url.startswith("sqlite")

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Emit SQL to stdout instead of executing it."""
    context.configure(
        url=sync_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=render_as_batch,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations over a short-lived sync connection."""
    connectable = create_engine(sync_url, poolclass=pool.NullPool)
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=render_as_batch,
        )
        with context.begin_transaction():
            context.run_migrations()
    connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
