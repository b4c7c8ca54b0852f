"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.api.errors import register_error_handlers
from app.api.v1 import auth, blog, content, leads, plans, products, services, uploads, users
from app.core.config import settings
from app.core.logging import get_logger, setup_logging
from app.db.session import check_connection, engine

API_PREFIX = "/api"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle hooks."""
    setup_logging("DEBUG" if settings.is_development else settings.LOG_LEVEL)
    logger = get_logger("startup")
    logger.info("Application starting", env=settings.APP_ENV, port=settings.PORT)
    yield
    await engine.dispose()
    logger.info("Application shutting down")


def create_app() -> FastAPI:
    app = FastAPI(
        title="BOOST Agency API",
        description="Content, catalogs, podcast and lead capture for the BOOST agency website",
        version="2.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    app.include_router(auth.router, prefix=API_PREFIX)
    app.include_router(users.router, prefix=API_PREFIX)
    app.include_router(content.router, prefix=API_PREFIX)
    app.include_router(services.router, prefix=API_PREFIX)
    app.include_router(plans.router, prefix=API_PREFIX)
    app.include_router(products.router, prefix=API_PREFIX)
    app.include_router(products.categories_router, prefix=API_PREFIX)
    app.include_router(blog.router, prefix=API_PREFIX)
    app.include_router(leads.router, prefix=API_PREFIX)
    app.include_router(uploads.router, prefix=API_PREFIX)
    app.mount(
        settings.UPLOAD_PUBLIC_PREFIX,
        StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False),
        name="uploads",
    )

    @app.get("/health", tags=["Health"])
    async def health_check() -> dict[str, str]:
        """Public health-check endpoint."""
        database = "ok" if await check_connection() else "unreachable"
        return {"status": "ok", "env": settings.APP_ENV, "database": database}

    return app


app = create_app()
