"""
Structured logging setup (structlog on top of the stdlib logging module).

Call `setup_logging()` once at process start; everything else asks for a
logger with `get_logger(name)` and logs events with keyword context:

    logger = get_logger("repositories.leads")
    logger.info("Lead created", lead_id=str(lead.id))
"""

from __future__ import annotations

import logging
import sys

import structlog

from app.core.config import settings


def setup_logging(level: str = "INFO") -> None:
    """Configure stdlib logging and structlog processors."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
        force=True,
    )
    # SQL echo is controlled by the engine, keep the logger quiet otherwise
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    renderer = (
        structlog.dev.ConsoleRenderer()
        if settings.is_development
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a named structured logger."""
    return structlog.get_logger(name)
