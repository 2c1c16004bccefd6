"""Final recommendation stage."""

from app.schemas.change_request import ChangeRequest, RiskLevel
from app.services.change_risk.context import Ctx
from app.services.change_risk.nodes.utils import make_result
from app.services.change_risk.state import WorkflowState

_STAGE = "final"

RECOMMENDED_ACTIONS = {
    RiskLevel.LOW: "Proceed with deployment",
    RiskLevel.MEDIUM: "Proceed with caution",
    RiskLevel.HIGH: "Delay or revise change",
}


def recommended_action(risk_level: RiskLevel) -> str:
    """Action for a verdict. Shared with anything that renders the result."""
    return RECOMMENDED_ACTIONS[RiskLevel(risk_level)]


def assessment_summary(risk_level: RiskLevel) -> str:
    risk_level = RiskLevel(risk_level)
    return (
        "Based on the analysis of all previous steps, this change has been "
        f"assigned a {risk_level.value} risk level. {recommended_action(risk_level)}."
    )


def final_recommendation(request: ChangeRequest, state: WorkflowState, ctx: Ctx) -> dict:
    """Package the closing summary for the verdict reached so far."""
    action = recommended_action(state.risk_level)
    return make_result(
        stage=_STAGE,
        risk_level=state.risk_level,
        factors=[
            "Final risk assessment complete",
            "All validation steps reviewed",
            "Comprehensive analysis performed",
        ],
        recommendations=[
            f"Recommended action: {action}",
            "Execute implementation plan according to schedule",
            "Monitor all identified risk factors",
            "Keep stakeholders informed of progress",
            "Document any deviations from plan",
            "Prepare post-implementation report",
        ],
        details={
            "recommended_action": action,
            "summary": assessment_summary(state.risk_level),
        },
    )
