"""
Centralized logging configuration for the change risk engine.

Usage:
    from app.core.logging import get_logger

    logger = get_logger(__name__)
    logger.info("Submitted change %s", title)

Assessment sessions log through a SessionLoggerAdapter so every line carries
the session id:

    log = session_logger(logger, session_id)
    log.info("Advanced to step %d", step)
"""

import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_NOISY_LOGGERS = ("httpx", "httpcore", "uvicorn.access", "multipart")


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure the root logger with a standard format.

    Should be called once at application startup (main.py or the FastAPI
    lifespan).

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Defaults to settings.LOG_LEVEL.
    """
    if level is None:
        from app.core.config import settings

        level = settings.LOG_LEVEL

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Logger name, typically __name__ of the calling module.

    Returns:
        Configured logger instance.
    """
    return logging.getLogger(name)


class SessionLoggerAdapter(logging.LoggerAdapter):
    """Prefixes every message with the assessment session id."""

    def process(self, msg, kwargs):
        return f"[session={self.extra['session_id']}] {msg}", kwargs


def session_logger(logger: logging.Logger, session_id: str) -> SessionLoggerAdapter:
    """Wrap *logger* so its records are tagged with *session_id*."""
    return SessionLoggerAdapter(logger, {"session_id": session_id})
