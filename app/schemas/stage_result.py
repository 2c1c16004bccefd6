"""
Stage result DTO for the change risk workflow.
"""

from typing import Dict, Any, List

from sqlmodel import SQLModel, Field

from app.schemas.change_request import RiskLevel


class StageResult(SQLModel):
    """
    Output of a single evaluation stage.

    Kept on WorkflowState.stage_results so callers can show per-stage evidence.
    """

    stage: str = Field(description="Name of the stage that produced this result.")
    risk_level: RiskLevel = Field(description="Verdict reported by the stage.")
    factors: List[str] = Field(
        default_factory=list, description="Risk factors contributed by the stage."
    )
    recommendations: List[str] = Field(
        default_factory=list, description="Recommendations contributed by the stage."
    )
    details: Dict[str, Any] = Field(
        default_factory=dict,
        description="Structured stage output (similar changes, evidence links, ...).",
    )
