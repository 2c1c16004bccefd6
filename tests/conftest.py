"""Shared fixtures for the change risk engine tests."""

from datetime import datetime

import pytest

from app.schemas.change_request import ChangeRequest
from app.services.change_risk.context import Ctx
from app.services.change_risk.engine import WorkflowEngine
from app.services.change_risk.evidence import StaticEvidenceSource
from app.services.change_risk.reference import ReferenceData, parse_reference_data
from app.services.change_risk.state import WorkflowState

REFERENCE = {
    "historical_changes": [
        {
            "id": "CHG0009001",
            "business_application_group": "Customer Data Services",
            "type": "standard",
            "outcome": "success",
        },
        {
            "id": "CHG0009014",
            "business_application_group": "Customer Data Services",
            "type": "standard",
            "outcome": "incident",
            "incident_details": {"incident_id": "INC0001234", "resolved": True},
        },
        {
            "id": "CHG0009102",
            "business_application_group": "Billing",
            "type": "standard",
            "outcome": "success",
        },
        {
            "id": "CHG0009118",
            "business_application_group": "Billing",
            "type": "standard",
            "outcome": "success",
        },
        {
            "id": "CHG0009120",
            "business_application_group": "Billing",
            "type": "emergency",
            "outcome": "success",
        },
        {
            "id": "CHG0009215",
            "business_application_group": "Payments",
            "type": "normal",
            "outcome": "incident",
            "incident_details": {"resolved": True},
        },
        {
            "id": "CHG0009216",
            "business_application_group": "Payments",
            "type": "normal",
            "outcome": "incident",
        },
    ],
    "scheduled_changes": [
        {
            "id": "CHG0010101",
            "business_application_group": "Network Infrastructure",
            "start": "2025-07-15T23:00:00",
            "end": "2025-07-16T01:00:00",
        },
    ],
    "maintenance_windows": [
        {
            "name": "Weekend",
            "days_of_week": ["saturday", "sunday"],
            "start_time": "00:00",
            "end_time": "23:59",
        },
    ],
}


def build_request(**overrides) -> ChangeRequest:
    data = {
        "title": "Database Server Upgrade",
        "description": "Upgrade database server from 10.2 to 11.5.",
        "justification": "Current version reaches end of support next month.",
        "planned_start": datetime(2025, 7, 15, 22, 0),
        "planned_end": datetime(2025, 7, 16, 3, 0),
        "business_application_group": "Customer Data Services",
        "declared_risk": "low",
        "change_type": "standard",
        "priority": "low",
        "approval_type": "standard",
    }
    data.update(overrides)
    return ChangeRequest(**data)


def build_ctx(reference=None, evidence=None, **overrides) -> Ctx:
    reference = reference if reference is not None else parse_reference_data(REFERENCE)
    return Ctx(
        history=overrides.pop("history", reference),
        calendar=overrides.pop("calendar", reference),
        windows=overrides.pop("windows", reference),
        evidence=evidence or StaticEvidenceSource(has_evidence=True, passed=True),
        **overrides,
    )


@pytest.fixture
def make_request():
    return build_request


@pytest.fixture
def reference() -> ReferenceData:
    return parse_reference_data(REFERENCE)


@pytest.fixture
def ctx(reference) -> Ctx:
    return build_ctx(reference)


@pytest.fixture
def engine(ctx) -> WorkflowEngine:
    return WorkflowEngine(ctx)


@pytest.fixture
def empty_state() -> WorkflowState:
    return WorkflowState()


@pytest.fixture
def make_ctx():
    return build_ctx
