from fastapi import APIRouter
from app.api.endpoints import assessments_router, health_router

router = APIRouter(prefix="/api/v1")

router.include_router(assessments_router, prefix="/assessments", tags=["assessments"])
router.include_router(health_router, prefix="/health", tags=["health"])
