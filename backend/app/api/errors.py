"""
Exception handlers producing the `{success: false, error, details?}` envelope.

`details` is only included in development so store errors and stack
context never leak from production responses.
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.core.errors import AppError, ValidationError
from app.core.logging import get_logger

logger = get_logger("api.errors")


def error_body(message: str, details: Any | None = None, *, always_include: bool = False) -> dict[str, Any]:
    body: dict[str, Any] = {"success": False, "error": message}
    if details is not None and (always_include or settings.is_development):
        body["details"] = details
    return body


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("Request failed", path=request.url.path, error=exc.message)
        # validation details are returned in every environment
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(
                exc.message,
                exc.details,
                always_include=isinstance(exc, ValidationError),
            ),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        fields = [".".join(str(part) for part in err.get("loc", ())[1:]) for err in errors]
        message = "Invalid request: " + ", ".join(field for field in fields if field) if fields else "Invalid request"
        return JSONResponse(
            status_code=400,
            content=error_body(
                message,
                [{"field": field, "message": err.get("msg")} for field, err in zip(fields, errors)],
                always_include=True,
            ),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=error_body(str(exc.detail)))

    @app.exception_handler(SQLAlchemyError)
    async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.error("Store error", path=request.url.path, error=str(exc), exc_info=exc)
        return JSONResponse(status_code=500, content=error_body("Database error", str(exc)))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error", path=request.url.path, error=str(exc), exc_info=exc)
        return JSONResponse(status_code=500, content=error_body("Internal server error", str(exc)))
