"""Historical analysis stage: risk from similar past changes."""

from app.core.logging import get_logger
from app.schemas.change_request import ChangeRequest, RiskLevel
from app.schemas.reference_data import Outcome
from app.services.change_risk.context import Ctx
from app.services.change_risk.nodes.utils import make_result
from app.services.change_risk.state import WorkflowState

logger = get_logger(__name__)

_STAGE = "historical"

HISTORICAL_RECOMMENDATIONS = (
    "Review similar past changes",
    "Consider successful patterns from previous changes",
    "Prepare for known issues based on historical data",
    "Document lessons learned from previous incidents",
)


def historical_analysis(request: ChangeRequest, state: WorkflowState, ctx: Ctx) -> dict:
    """Compare the request with past changes of the same group and type.

    The verdict here replaces the incoming one: incidents give MEDIUM, a clean
    record gives LOW, and no precedent keeps the current verdict.
    """
    similar = list(
        ctx.history.query_similar_changes(
            request.business_application_group, request.change_type
        )
    )
    details = {
        "similar_changes": [c.model_dump(mode="json") for c in similar],
        "incident_count": 0,
    }

    if not similar:
        logger.debug(
            "No similar changes for %s/%s",
            request.business_application_group,
            request.change_type.value,
        )
        return make_result(
            stage=_STAGE,
            risk_level=state.risk_level,
            factors=["No similar changes found in history - proceeding with caution"],
            recommendations=HISTORICAL_RECOMMENDATIONS,
            details=details,
        )

    incidents = [c for c in similar if c.outcome == Outcome.INCIDENT]
    details["incident_count"] = len(incidents)

    if incidents:
        risk_level = RiskLevel.MEDIUM
        first_id = incidents[0].id
        all_resolved = all(
            c.incident_details is not None and c.incident_details.resolved
            for c in incidents
        )
        if all_resolved:
            factor = (
                f"Similar changes had incidents in the past (Change ID: {first_id}), "
                "but all were successfully resolved"
            )
        else:
            factor = f"Similar changes resulted in unresolved incidents (Change ID: {first_id})"
    else:
        risk_level = RiskLevel.LOW
        factor = f"{len(similar)} similar changes completed successfully"

    logger.debug(
        "Historical analysis: %d similar, %d incidents -> %s",
        len(similar),
        len(incidents),
        risk_level.value,
    )

    return make_result(
        stage=_STAGE,
        risk_level=risk_level,
        factors=[factor],
        recommendations=HISTORICAL_RECOMMENDATIONS,
        details=details,
    )
