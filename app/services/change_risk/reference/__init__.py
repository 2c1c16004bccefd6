"""
Reference data providers for the change risk engine.
"""

from app.services.change_risk.reference.loader import (
    ReferenceData,
    load_reference_data,
    parse_reference_data,
)
from app.services.change_risk.reference.providers import (
    HistoricalChangeLog,
    MaintenanceWindowRegistry,
    ScheduledChangeCalendar,
)

__all__ = [
    "ReferenceData",
    "load_reference_data",
    "parse_reference_data",
    "HistoricalChangeLog",
    "MaintenanceWindowRegistry",
    "ScheduledChangeCalendar",
]
