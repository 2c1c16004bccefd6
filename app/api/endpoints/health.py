from fastapi import APIRouter

from app.dependencies.assessments import RegistryDep

router = APIRouter()


@router.get("")
def health_check(registry: RegistryDep):
    """
    Check the health of the API.
    """
    return {"status": "ok", "assessments": len(registry)}
