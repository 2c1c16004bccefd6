"""
Change Risk API Dependencies
"""

from typing import Annotated

from fastapi import Depends

from app.services.change_risk.registry import (
    AssessmentRegistry,
    get_assessment_registry,
)


def get_registry() -> AssessmentRegistry:
    """Get the assessment registry (Dependency Injection)."""
    return get_assessment_registry()


RegistryDep = Annotated[AssessmentRegistry, Depends(get_registry)]
