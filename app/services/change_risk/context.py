"""
Runtime context for the change risk stages.

Defines the dependencies injected into every stage evaluator.
"""

from dataclasses import dataclass
from typing import Optional

from app.core.config import settings
from app.schemas.change_request import ChangeRequest
from app.services.change_risk.evidence import (
    SimulatedEvidenceSource,
    TestEvidenceSource,
)
from app.services.change_risk.reference import (
    HistoricalChangeLog,
    MaintenanceWindowRegistry,
    ReferenceData,
    ScheduledChangeCalendar,
    load_reference_data,
)


@dataclass(frozen=True)
class Ctx:
    """Runtime context for stage evaluators.

    Attributes:
        history: Historical change log.
        calendar: Scheduled change calendar.
        windows: Maintenance window registry.
        evidence: Source of test evidence for the testing stage.
        peak_hours_start: First peak hour, inclusive.
        peak_hours_end: Last peak hour, inclusive.
    """

    history: HistoricalChangeLog
    calendar: ScheduledChangeCalendar
    windows: MaintenanceWindowRegistry
    evidence: TestEvidenceSource
    peak_hours_start: int = 6
    peak_hours_end: int = 23


@dataclass(frozen=True)
class StageRun:
    """LangGraph context for one stage invocation.

    Attributes:
        request: The change request under assessment.
        ctx: Injected dependencies.
        step: The step the stage produces.
    """

    request: ChangeRequest
    ctx: Ctx
    step: int


def build_context(
    reference: Optional[ReferenceData] = None,
    evidence: Optional[TestEvidenceSource] = None,
) -> Ctx:
    """
    Build a context from settings.

    Reference data defaults to the file at settings.REFERENCE_DATA_PATH and the
    evidence source to a SimulatedEvidenceSource using the configured odds.
    """
    if reference is None:
        reference = load_reference_data(settings.REFERENCE_DATA_PATH)
    if evidence is None:
        evidence = SimulatedEvidenceSource(
            pass_probability=settings.TEST_PASS_PROBABILITY,
            evidence_probability=settings.TEST_EVIDENCE_PROBABILITY,
            seed=settings.SIMULATION_SEED,
        )
    return Ctx(
        history=reference,
        calendar=reference,
        windows=reference,
        evidence=evidence,
        peak_hours_start=settings.PEAK_HOURS_START,
        peak_hours_end=settings.PEAK_HOURS_END,
    )
