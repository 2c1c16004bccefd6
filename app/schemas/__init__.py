"""
Schema and DTO package.
"""

from app.schemas.change_request import (
    ApprovalType,
    ChangeRequest,
    ChangeType,
    Priority,
    RiskLevel,
)
from app.schemas.reference_data import (
    HistoricalChange,
    IncidentDetails,
    MaintenanceWindow,
    Outcome,
    ScheduledChange,
)
from app.schemas.stage_result import StageResult

__all__ = [
    "ApprovalType",
    "ChangeRequest",
    "ChangeType",
    "Priority",
    "RiskLevel",
    "HistoricalChange",
    "IncidentDetails",
    "MaintenanceWindow",
    "Outcome",
    "ScheduledChange",
    "StageResult",
]
