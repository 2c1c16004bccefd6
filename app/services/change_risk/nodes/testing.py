"""Testing and mitigation validation stage."""

from app.core.logging import get_logger
from app.schemas.change_request import ChangeRequest, ChangeType, RiskLevel
from app.services.change_risk.context import Ctx
from app.services.change_risk.nodes.utils import make_result
from app.services.change_risk.state import WorkflowState

logger = get_logger(__name__)

_STAGE = "testing"

TESTING_FOLLOW_UPS = (
    "Document all test results and outcomes",
    "Update test cases based on findings",
)


def _emergency_result(request: ChangeRequest) -> dict:
    # Testing is never feasible for emergency changes; only the backout plan
    # mitigates. A missing flag counts as no plan.
    has_plan = bool(request.has_backout_plan)
    if has_plan:
        factors = [
            "Testing not feasible due to emergency nature",
            "Backout plan in place as mitigation",
        ]
        recommendations = [
            "Ensure backout plan is readily available",
            "Schedule additional support staff during implementation",
            "Prepare for immediate rollback if needed",
        ]
    else:
        factors = [
            "Testing not feasible due to emergency nature",
            "No comprehensive backout plan identified",
        ]
        recommendations = [
            "URGENT: Develop backout plan before proceeding",
            "Consider alternative implementation approaches",
            "Required: Additional approval for no-test implementation",
        ]

    return make_result(
        stage=_STAGE,
        risk_level=RiskLevel.HIGH,
        factors=factors,
        recommendations=[*recommendations, *TESTING_FOLLOW_UPS],
        details={
            "testing_feasible": False,
            "has_backout_plan": has_plan,
            "backout_plan_recorded": request.has_backout_plan is not None,
        },
    )


def testing_validation(request: ChangeRequest, state: WorkflowState, ctx: Ctx) -> dict:
    """Validate pre-implementation testing, or the backout plan for emergencies."""
    if request.change_type == ChangeType.EMERGENCY:
        logger.debug("Emergency change %r: testing not feasible", request.title)
        return _emergency_result(request)

    evidence = ctx.evidence.collect(request)
    details = {
        "testing_feasible": True,
        "test_completion_link": evidence.completion_link,
        "tests_passed": evidence.passed if evidence.has_evidence else None,
    }

    if not evidence.has_evidence:
        risk_level = RiskLevel.HIGH
        factors = [
            "No test completion link available",
            "Unable to verify test execution",
            "Testing documentation incomplete",
        ]
        recommendations = [
            "URGENT: Provide test completion documentation",
            "Review testing process compliance",
            "Required: Additional approval for incomplete testing documentation",
        ]
    elif evidence.passed:
        risk_level = RiskLevel.LOW
        factors = [
            "Pre-production testing completed successfully",
            "All test cases passed",
            "No significant issues identified",
        ]
        recommendations = [
            "Proceed with implementation as planned",
            "Monitor system performance post-deployment",
            "Keep test results for future reference",
        ]
    else:
        risk_level = RiskLevel.HIGH
        factors = [
            "Pre-production testing revealed issues",
            "Critical test cases failed",
            "Performance impact detected",
        ]
        recommendations = [
            "Address failed test cases before proceeding",
            "Review and update implementation plan",
            "Consider scheduling additional testing window",
        ]

    logger.debug(
        "Testing validation for %r: evidence=%s passed=%s -> %s",
        request.title,
        evidence.has_evidence,
        evidence.passed,
        risk_level.value,
    )

    return make_result(
        stage=_STAGE,
        risk_level=risk_level,
        factors=factors,
        recommendations=[*recommendations, *TESTING_FOLLOW_UPS],
        details=details,
    )
