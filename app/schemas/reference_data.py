"""
Reference data records consumed by the risk engine.

These are owned by surrounding infrastructure (change log, change calendar,
maintenance window registry) and are read-only from the engine's side.
"""

from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)

from app.schemas.change_request import ChangeType

# datetime.weekday() numbering: Monday == 0.
WEEKDAY_NAMES = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


class Outcome(str, Enum):
    """Outcome of a past change."""

    SUCCESS = "success"
    INCIDENT = "incident"


class IncidentDetails(BaseModel):
    """Incident raised by a past change."""

    model_config = ConfigDict(frozen=True)

    incident_id: Optional[str] = Field(default=None, description="Incident number.")
    resolved: bool = Field(default=False, description="Whether it was resolved.")
    description: Optional[str] = Field(default=None)


class HistoricalChange(BaseModel):
    """A completed change from the historical change log."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Change record number.")
    business_application_group: str
    type: ChangeType = Field(description="Change type of the past change.")
    outcome: Outcome
    incident_details: Optional[IncidentDetails] = None


class ScheduledChange(BaseModel):
    """A change already booked on the change calendar, over [start, end)."""

    model_config = ConfigDict(frozen=True)

    id: str
    business_application_group: str
    title: Optional[str] = None
    start: datetime
    end: datetime

    @field_validator("start", "end")
    @classmethod
    def _local_time(cls, value: datetime) -> datetime:
        # Compared with request times as local wall-clock times.
        return value.replace(tzinfo=None)


class MaintenanceWindow(BaseModel):
    """
    A recurring weekday-and-hour window in which changes are pre-approved.

    Hours are whole local hours. Times given as "HH:MM" are truncated to the
    hour, so a window from "22:30" behaves like one from "22:00".
    A window whose start hour is after its end hour (one crossing midnight)
    is accepted but never matches a change.
    """

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    days_of_week: Tuple[int, ...] = Field(
        description="Applicable weekdays, Monday == 0. Names are accepted on input."
    )
    start_hour: int = Field(
        ge=0, le=23, validation_alias=AliasChoices("start_hour", "start_time")
    )
    end_hour: int = Field(
        ge=0, le=23, validation_alias=AliasChoices("end_hour", "end_time")
    )

    @field_validator("days_of_week", mode="before")
    @classmethod
    def _parse_days(cls, value):
        if isinstance(value, (str, int)):
            value = [value]
        days = []
        for day in value:
            if isinstance(day, str) and not day.isdigit():
                try:
                    day = WEEKDAY_NAMES.index(day.strip().lower())
                except ValueError:
                    raise ValueError(f"unknown weekday name: {day!r}") from None
            day = int(day)
            if not 0 <= day <= 6:
                raise ValueError(f"weekday out of range: {day}")
            days.append(day)
        return tuple(sorted(set(days)))

    @field_validator("start_hour", "end_hour", mode="before")
    @classmethod
    def _parse_hour(cls, value):
        # "HH:MM" -> HH; minutes are ignored.
        if isinstance(value, str) and ":" in value:
            return int(value.split(":", 1)[0])
        return value
