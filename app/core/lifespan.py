from contextlib import asynccontextmanager
from fastapi import FastAPI

from app.core.config import settings
from app.core.logging import get_logger, setup_logging
from app.services.change_risk.registry import get_assessment_registry

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """
    Lifespan function for the FastAPI application.
    Loads reference data once at startup and drops open assessments on shutdown.
    """
    # 1. Configure logging
    setup_logging(settings.LOG_LEVEL)

    # 2. Build the shared registry (loads reference data)
    registry = get_assessment_registry()
    logger.info("%s started", settings.PROJECT_NAME)

    yield

    # 3. Discard in-memory assessments
    logger.info("Shutting down with %d open assessments", len(registry))
