"""
Pydantic Settings — centralized configuration loaded from environment variables.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Database ──────────────────────────────
    POSTGRES_USER: str = "boost_user"
    POSTGRES_PASSWORD: str = "boost_pass"
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "boost_agency"
    DATABASE_URL_OVERRIDE: str = ""
    DB_POOL_SIZE: int = 20
    DB_MAX_OVERFLOW: int = 10

    @property
    def DATABASE_URL(self) -> str:
        """Async URL for app runtime (asyncpg)."""
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        return f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    @property
    def DATABASE_URL_SYNC(self) -> str:
        """Sync URL for Alembic migrations (psycopg2)."""
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    # ── Auth / JWT ────────────────────────────
    JWT_SECRET_KEY: str = "change-this-in-production"
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    BCRYPT_ROUNDS: int = 10

    # ── HTTP ──────────────────────────────────
    PORT: int = 3000
    CORS_ORIGINS: str = "*"

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    # ── Uploads ───────────────────────────────
    UPLOAD_DIR: str = "uploads"
    UPLOAD_MAX_BYTES: int = 10 * 1024 * 1024
    UPLOAD_MAX_FILES: int = 10
    UPLOAD_PUBLIC_PREFIX: str = "/uploads"

    # ── Pagination ────────────────────────────
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100

    # ── Application ───────────────────────────
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"
    LEGACY_DATA_DIR: str = "content/formularios"

    @property
    def is_development(self) -> bool:
        return self.APP_ENV == "development"

    model_config = {"env_file": ["../.env", ".env"], "extra": "ignore"}


settings = Settings()
