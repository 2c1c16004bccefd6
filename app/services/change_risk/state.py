"""
Workflow state model for the change risk engine.

Pure graph state — no service-layer imports. Fields carrying a reducer in
their Annotated metadata are folded by LangGraph when a stage returns an
update; the rest are overwritten.
"""

from typing import Annotated, Tuple
import operator
import uuid

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.change_request import RiskLevel
from app.schemas.reference_data import ScheduledChange
from app.schemas.stage_result import StageResult

TERMINAL_STEP = 6


def replace_risk_level(left: RiskLevel, right: RiskLevel) -> RiskLevel:
    """
    Reducer for risk_level. The latest stage's verdict wins.

    Verdicts are not combined by severity: a stage may lower the verdict
    set by an earlier stage.
    """
    return right


class WorkflowState(BaseModel):
    """
    State of one change risk assessment.

    Frozen: every transition produces a new instance, so callers can keep
    earlier states around for review.
    """

    model_config = ConfigDict(frozen=True)

    session_id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        description="The id of the assessment session.",
    )
    current_step: int = Field(
        default=0, ge=0, le=TERMINAL_STEP, description="Last completed step."
    )
    risk_level: Annotated[RiskLevel, replace_risk_level] = Field(
        default=RiskLevel.MEDIUM, description="The current risk verdict."
    )
    risk_factors: Annotated[Tuple[str, ...], operator.add] = Field(
        default=(), description="Risk factors in stage order."
    )
    recommendations: Annotated[Tuple[str, ...], operator.add] = Field(
        default=(), description="Recommendations in stage order."
    )
    stage_results: Annotated[Tuple[StageResult, ...], operator.add] = Field(
        default=(), description="Per-stage outputs in stage order."
    )
    conflicting_changes: Tuple[ScheduledChange, ...] = Field(
        default=(), description="Scheduled changes overlapping the request."
    )

    @property
    def is_terminal(self) -> bool:
        return self.current_step >= TERMINAL_STEP

    @property
    def completed_stages(self) -> Tuple[str, ...]:
        return tuple(result.stage for result in self.stage_results)


