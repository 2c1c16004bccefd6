"""Shared utilities for change risk stage evaluators."""

from typing import Iterable

from app.schemas.change_request import RiskLevel
from app.schemas.stage_result import StageResult


def make_result(
    stage: str,
    risk_level: RiskLevel,
    factors: Iterable[str],
    recommendations: Iterable[str],
    details: dict,
    **extra,
) -> dict:
    """Build a standard stage return dict with a single StageResult.

    Extra keyword arguments are merged into the returned dict,
    useful for passing additional state keys (e.g. conflicting_changes).
    """
    factors = list(factors)
    recommendations = list(recommendations)
    return {
        "risk_level": risk_level,
        "risk_factors": factors,
        "recommendations": recommendations,
        "stage_results": [
            StageResult(
                stage=stage,
                risk_level=risk_level,
                factors=factors,
                recommendations=recommendations,
                details=details,
            )
        ],
        **extra,
    }
