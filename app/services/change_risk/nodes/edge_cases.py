"""Edge case stage: manual vs. standard approval pathway."""

from app.core.logging import get_logger
from app.schemas.change_request import ApprovalType, ChangeRequest, RiskLevel
from app.services.change_risk.context import Ctx
from app.services.change_risk.nodes.utils import make_result
from app.services.change_risk.state import WorkflowState

logger = get_logger(__name__)

_STAGE = "edge_cases"


def edge_case_handling(request: ChangeRequest, state: WorkflowState, ctx: Ctx) -> dict:
    """Manual approval raises the verdict to HIGH; standard keeps the current one."""
    manual = request.approval_type == ApprovalType.MANUAL

    if manual:
        risk_level = RiskLevel.HIGH
        factors = [
            "Manual approval process requires additional documentation",
            "Emergency change validation bypassed",
            "Increased monitoring required",
        ]
        recommendations = [
            "Document manual approval justification",
            "Implement enhanced monitoring",
            "Prepare immediate response team",
            "Set up additional monitoring checkpoints",
            "Schedule post-implementation review",
        ]
    else:
        risk_level = state.risk_level
        factors = [
            "Standard validation process completed",
            "All required approvals obtained",
            "Normal monitoring sufficient",
        ]
        recommendations = [
            "Proceed with standard implementation",
            "Follow normal monitoring procedures",
            "Update documentation as required",
            "Schedule regular checkpoints",
        ]

    logger.debug(
        "Edge case handling for %r: approval=%s -> %s",
        request.title,
        request.approval_type.value,
        risk_level.value,
    )

    return make_result(
        stage=_STAGE,
        risk_level=risk_level,
        factors=factors,
        recommendations=recommendations,
        details={"approval_type": request.approval_type.value},
    )
