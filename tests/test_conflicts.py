from datetime import datetime, timedelta

import pytest

from app.schemas.change_request import RiskLevel
from app.schemas.reference_data import MaintenanceWindow
from app.services.change_risk.nodes.conflicts import conflict_detection
from app.services.change_risk.reference import parse_reference_data
from app.services.change_risk.scheduling import in_maintenance_window, intervals_overlap


def t(hour, day=15, minute=0):
    return datetime(2025, 7, day, hour, minute)


@pytest.mark.parametrize(
    "a, b, expected",
    [
        ((t(22), t(3, day=16)), (t(23), t(1, day=16)), True),  # contains
        ((t(10), t(12)), (t(10), t(12)), True),  # identical
        ((t(10), t(12)), (t(11), t(13)), True),  # partial
        ((t(10), t(12)), (t(12), t(14)), False),  # shared boundary only
        ((t(10), t(12)), (t(13), t(14)), False),  # disjoint
    ],
)
def test_overlap_is_symmetric(a, b, expected):
    assert intervals_overlap(*a, *b) is expected
    assert intervals_overlap(*b, *a) is expected


def test_window_uses_hours_only():
    window = MaintenanceWindow(days_of_week=["tuesday"], start_time="22:00", end_time="23:59")
    assert window.start_hour == 22 and window.end_hour == 23
    # 22:30 counts as inside a 22:00 window.
    assert in_maintenance_window(t(22, minute=30), t(23, minute=45), window)
    assert not in_maintenance_window(t(21, minute=59), t(23), window)


def test_window_weekday_comes_from_start():
    window = MaintenanceWindow(days_of_week=[1], start_hour=0, end_hour=23)  # Tuesday
    assert in_maintenance_window(t(1), t(2), window)
    assert not in_maintenance_window(t(1, day=16), t(2, day=16), window)


def test_overlapping_change_is_high(make_request, ctx, empty_state):
    request = make_request(planned_start=t(22), planned_end=t(3, day=16))
    result = conflict_detection(request, empty_state, ctx)

    assert result["risk_level"] == RiskLevel.HIGH
    assert [c.id for c in result["conflicting_changes"]] == ["CHG0010101"]
    assert result["risk_factors"][0] == (
        "Scheduling conflict detected with: Change CHG0010101 (Network Infrastructure)"
    )


def test_every_conflict_is_listed(make_request, make_ctx, empty_state):
    reference = parse_reference_data(
        {
            "scheduled_changes": [
                {
                    "id": "CHG1",
                    "business_application_group": "A",
                    "start": t(9),
                    "end": t(11),
                },
                {"id": "CHG2", "business_application_group": "B", "start": t(11), "end": t(13)},
                {"id": "CHG3", "business_application_group": "C", "start": t(13), "end": t(15)},
            ]
        }
    )
    request = make_request(planned_start=t(10), planned_end=t(13))
    result = conflict_detection(request, empty_state, make_ctx(reference))

    assert result["risk_factors"][0] == (
        "Scheduling conflict detected with: Change CHG1 (A), Change CHG2 (B)"
    )
    assert len(result["conflicting_changes"]) == 2


def test_conflict_wins_over_maintenance_window(make_request, make_ctx, empty_state):
    reference = parse_reference_data(
        {
            "scheduled_changes": [
                {
                    "id": "CHG1",
                    "business_application_group": "A",
                    "start": t(10, day=19),
                    "end": t(11, day=19),
                },
            ],
            "maintenance_windows": [
                {"days_of_week": ["saturday"], "start_hour": 0, "end_hour": 23},
            ],
        }
    )
    request = make_request(planned_start=t(9, day=19), planned_end=t(12, day=19))
    assert conflict_detection(request, empty_state, make_ctx(reference))["risk_level"] == RiskLevel.HIGH


def test_inside_window_without_conflicts_is_low(make_request, ctx, empty_state):
    # 2025-07-19 is a Saturday.
    request = make_request(planned_start=t(10, day=19), planned_end=t(12, day=19))
    result = conflict_detection(request, empty_state, ctx)

    assert result["risk_level"] == RiskLevel.LOW
    assert result["conflicting_changes"] == ()
    assert "Change scheduled within approved maintenance window" in result["risk_factors"]
    assert result["stage_results"][0].details["maintenance_window"]["name"] == "Weekend"


def test_outside_window_without_conflicts_is_medium(make_request, ctx, empty_state):
    request = make_request(planned_start=t(10, day=17), planned_end=t(12, day=17))
    result = conflict_detection(request, empty_state, ctx)

    assert result["risk_level"] == RiskLevel.MEDIUM
    assert result["risk_factors"][0] == "Change scheduled outside maintenance window"


def test_coarse_calendar_results_are_filtered(make_request, make_ctx, reference, empty_state):
    class DayCalendar:
        """Returns every booked change regardless of time."""

        def query_overlapping_changes(self, start, end):
            return reference.scheduled_changes

    start = t(10, day=17)
    request = make_request(planned_start=start, planned_end=start + timedelta(hours=1))
    result = conflict_detection(request, empty_state, make_ctx(reference, calendar=DayCalendar()))

    assert result["conflicting_changes"] == ()
    assert result["risk_level"] == RiskLevel.MEDIUM


def test_conflict_detection_is_deterministic(make_request, ctx, empty_state):
    request = make_request()
    assert conflict_detection(request, empty_state, ctx) == conflict_detection(
        request, empty_state, ctx
    )


def test_overnight_window_never_matches():
    window = MaintenanceWindow(days_of_week=[1], start_time="22:00", end_time="06:00")
    assert not in_maintenance_window(t(22), t(23), window)
    assert not in_maintenance_window(t(23), t(5, day=16), window)
