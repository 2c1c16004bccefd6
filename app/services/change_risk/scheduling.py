"""
Time interval helpers for conflict detection.

Intervals are half-open: [start, end).
"""

from datetime import datetime

from app.schemas.reference_data import MaintenanceWindow


def intervals_overlap(
    a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime
) -> bool:
    """
    True if [a_start, a_end) and [b_start, b_end) share any instant.

    a starts inside b, a ends inside b, or a contains b. Intervals that only
    touch at a boundary do not overlap.
    """
    return (
        (b_start <= a_start < b_end)
        or (b_start < a_end <= b_end)
        or (a_start <= b_start and a_end >= b_end)
    )


def in_maintenance_window(
    start: datetime, end: datetime, window: MaintenanceWindow
) -> bool:
    """
    True if a change over [start, end) fits *window*.

    The weekday comes from *start*. Only whole hours are compared: a change
    starting 22:30 fits a window opening at 22:00, and a window closing at
    23:59 is treated as closing at 23.
    """
    return (
        start.weekday() in window.days_of_week
        and start.hour >= window.start_hour
        and end.hour <= window.end_hour
    )
