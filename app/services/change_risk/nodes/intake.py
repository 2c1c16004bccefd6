"""Intake stage: initial verdict from the request's declared attributes."""

from app.core.logging import get_logger
from app.schemas.change_request import (
    ApprovalType,
    ChangeRequest,
    ChangeType,
    RiskLevel,
)
from app.services.change_risk.context import Ctx
from app.services.change_risk.nodes.utils import make_result
from app.services.change_risk.state import WorkflowState

logger = get_logger(__name__)

_STAGE = "intake"


def initial_risk_level(request: ChangeRequest) -> RiskLevel:
    """Declared risk, unless the change is an emergency."""
    if request.change_type == ChangeType.EMERGENCY:
        return RiskLevel.HIGH
    return request.declared_risk


def is_peak_hours(request: ChangeRequest, ctx: Ctx) -> bool:
    return ctx.peak_hours_start <= request.planned_start.hour <= ctx.peak_hours_end


def intake_evaluation(request: ChangeRequest, state: WorkflowState, ctx: Ctx) -> dict:
    """Derive the step-1 verdict, factors and recommendations.

    Depends only on the request (and the configured peak hours); *state* is
    the empty state of a fresh session.
    """
    risk_level = initial_risk_level(request)
    factors: list[str] = []
    recommendations: list[str] = []

    if request.change_type == ChangeType.EMERGENCY:
        factors.append("Emergency change type automatically elevates risk")
        recommendations.append("Prepare emergency response team")
        if request.approval_type == ApprovalType.MANUAL:
            factors.append("Manual approval pathway selected")
            recommendations.append("Document manual approval justification")

    peak = is_peak_hours(request, ctx)
    if peak:
        factors.append(
            f"Change scheduled during peak hours "
            f"({ctx.peak_hours_start:02d}:00 - {ctx.peak_hours_end:02d}:59)"
        )
        recommendations.append("Consider rescheduling during off-peak hours")

    if request.declared_risk == RiskLevel.HIGH:
        factors.append("High risk declared by requester")
        recommendations.append("Implement enhanced monitoring protocols")

    if not factors:
        factors.append(
            f"{risk_level.value.capitalize()} risk based on "
            f"{request.change_type.value} change type and declared risk level"
        )

    recommendations.append("Prepare detailed rollback plan")
    recommendations.append("Review change implementation steps")

    logger.debug(
        "Intake for %r: risk=%s peak_hours=%s", request.title, risk_level.value, peak
    )

    return make_result(
        stage=_STAGE,
        risk_level=risk_level,
        factors=factors,
        recommendations=recommendations,
        details={
            "declared_risk": request.declared_risk.value,
            "change_type": request.change_type.value,
            "approval_type": request.approval_type.value,
            "peak_hours": peak,
        },
    )
