"""
Read interfaces for the reference data the engine consumes.

Implementations must be safe for concurrent reads; the engine never writes
through them.
"""

from datetime import datetime
from typing import Protocol, Sequence, runtime_checkable

from app.schemas.change_request import ChangeType
from app.schemas.reference_data import (
    HistoricalChange,
    MaintenanceWindow,
    ScheduledChange,
)


@runtime_checkable
class HistoricalChangeLog(Protocol):
    def query_similar_changes(
        self, business_application_group: str, change_type: ChangeType
    ) -> Sequence[HistoricalChange]:
        """Past changes for the same group and change type."""
        ...


@runtime_checkable
class ScheduledChangeCalendar(Protocol):
    def query_overlapping_changes(
        self, start: datetime, end: datetime
    ) -> Sequence[ScheduledChange]:
        """Booked changes whose interval overlaps [start, end)."""
        ...


@runtime_checkable
class MaintenanceWindowRegistry(Protocol):
    def query_maintenance_windows(self) -> Sequence[MaintenanceWindow]:
        """All registered maintenance windows."""
        ...
