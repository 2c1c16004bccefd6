"""
Change request model and the enums shared across the risk engine.

Pure data model — no service imports.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class RiskLevel(str, Enum):
    """Risk verdict enum, ordered from least to most severe."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ChangeType(str, Enum):
    """Change type enum."""

    STANDARD = "standard"
    EMERGENCY = "emergency"
    NORMAL = "normal"


class Priority(str, Enum):
    """Change priority enum."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ApprovalType(str, Enum):
    """Approval pathway enum."""

    STANDARD = "standard"
    MANUAL = "manual"


# Text fields that must be non-blank on submission.
REQUIRED_TEXT_FIELDS = (
    "title",
    "description",
    "justification",
    "business_application_group",
)


class ChangeRequest(BaseModel):
    """
    A proposed infrastructure change.

    Immutable once constructed; the engine only ever reads it.
    """

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = Field(
        default=None, description="Optional change record number (e.g. CHG0010234)."
    )
    title: str = Field(description="Short title of the change.")
    description: str = Field(description="What the change does.")
    justification: str = Field(description="Why the change is needed.")
    planned_start: datetime = Field(
        description="Planned start, interpreted in the change's local time."
    )
    planned_end: datetime = Field(description="Planned end (exclusive).")
    business_application_group: str = Field(
        description="Business application group the change targets."
    )
    declared_risk: RiskLevel = Field(
        default=RiskLevel.LOW, description="Risk level declared by the requester."
    )
    change_type: ChangeType = Field(
        default=ChangeType.STANDARD, description="The type of the change."
    )
    priority: Priority = Field(default=Priority.LOW, description="The priority.")
    approval_type: ApprovalType = Field(
        default=ApprovalType.STANDARD, description="The approval pathway."
    )
    has_backout_plan: Optional[bool] = Field(
        default=None,
        description="Whether a backout plan is on file. None means not recorded.",
    )
