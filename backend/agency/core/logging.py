"""
Structured logging setup (structlog on top of stdlib logging).

Usage:
    from agency.core.logging import get_logger

    logger = get_logger(__name__)
    logger.info("Policy deleted", policy_id=7, claims=2)
"""

from __future__ import annotations

import logging
import sys

import structlog

from agency.core.config import settings


def setup_logging(level: str = "INFO", *, json_logs: bool | None = None) -> None:
    """Configure structlog + stdlib logging once at startup."""
    lvl = getattr(logging, level.upper(), logging.INFO)
    use_json = settings.LOG_JSON if json_logs is None else json_logs

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer() if use_json else structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(stream=sys.stdout, level=lvl, format="%(message)s")

    # SQLAlchemy echo is controlled by settings.SQL_ECHO, keep its logger quiet otherwise
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger bound to `name`."""
    return structlog.get_logger(name)
