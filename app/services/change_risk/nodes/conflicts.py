"""Conflict detection stage: calendar overlaps and maintenance windows."""

from typing import Optional

from app.core.logging import get_logger
from app.schemas.change_request import ChangeRequest, RiskLevel
from app.schemas.reference_data import MaintenanceWindow, ScheduledChange
from app.services.change_risk.context import Ctx
from app.services.change_risk.nodes.utils import make_result
from app.services.change_risk.scheduling import in_maintenance_window, intervals_overlap
from app.services.change_risk.state import WorkflowState

logger = get_logger(__name__)

_STAGE = "conflicts"

CONFLICT_FOLLOW_UPS = (
    "Maintain communication with affected teams",
    "Update change calendar accordingly",
)


def find_conflicts(request: ChangeRequest, ctx: Ctx) -> list[ScheduledChange]:
    """Scheduled changes overlapping the request's [start, end)."""
    start, end = request.planned_start, request.planned_end
    # Providers may answer coarsely (e.g. by day); keep only true overlaps.
    return [
        change
        for change in ctx.calendar.query_overlapping_changes(start, end)
        if intervals_overlap(start, end, change.start, change.end)
    ]


def find_maintenance_window(
    request: ChangeRequest, ctx: Ctx
) -> Optional[MaintenanceWindow]:
    """First maintenance window the request fits in, if any."""
    return next(
        (
            window
            for window in ctx.windows.query_maintenance_windows()
            if in_maintenance_window(request.planned_start, request.planned_end, window)
        ),
        None,
    )


def describe_conflicts(conflicts: list[ScheduledChange]) -> str:
    return ", ".join(
        f"Change {c.id} ({c.business_application_group})" for c in conflicts
    )


def conflict_detection(request: ChangeRequest, state: WorkflowState, ctx: Ctx) -> dict:
    """Classify the schedule.

    Any overlap -> HIGH; no overlap inside a maintenance window -> LOW;
    no overlap outside every window -> MEDIUM.
    """
    conflicts = find_conflicts(request, ctx)
    window = find_maintenance_window(request, ctx)
    details = {
        "conflicting_change_ids": [c.id for c in conflicts],
        "maintenance_window": window.model_dump(mode="json") if window else None,
    }

    if conflicts:
        risk_level = RiskLevel.HIGH
        factors = [
            f"Scheduling conflict detected with: {describe_conflicts(conflicts)}",
            "Overlapping change windows may impact service",
            "Resource contention possible",
        ]
        recommendations = [
            "Reschedule change to avoid conflicts",
            "Coordinate with other change owners",
            "Consider breaking down the change into smaller windows",
        ]
    elif window is not None:
        risk_level = RiskLevel.LOW
        factors = [
            "No scheduling conflicts detected",
            "Change scheduled within approved maintenance window",
            "No resource conflicts identified",
        ]
        recommendations = [
            "Proceed with scheduled timeframe",
            "Ensure all stakeholders are notified",
            "Follow standard change procedures",
        ]
    else:
        risk_level = RiskLevel.MEDIUM
        factors = [
            "Change scheduled outside maintenance window",
            "Additional approval may be required",
            "Business impact assessment needed",
        ]
        recommendations = [
            "Consider rescheduling within maintenance window",
            "Obtain additional approvals for out-of-window execution",
            "Prepare detailed business justification",
        ]

    logger.debug(
        "Conflict detection for %r: %d conflicts, window=%s -> %s",
        request.title,
        len(conflicts),
        window.name if window else None,
        risk_level.value,
    )

    return make_result(
        stage=_STAGE,
        risk_level=risk_level,
        factors=factors,
        recommendations=[*recommendations, *CONFLICT_FOLLOW_UPS],
        details=details,
        conflicting_changes=tuple(conflicts),
    )
