"""
Change risk assessment engine.
"""

from app.services.change_risk.context import Ctx, build_context
from app.services.change_risk.engine import (
    WorkflowEngine,
    is_terminal,
    validate_change_request,
)
from app.services.change_risk.errors import (
    ChangeRiskError,
    EvaluatorError,
    NoActiveSessionError,
    ReferenceDataError,
    StaleStateError,
    TerminalStateError,
    ValidationError,
)
from app.services.change_risk.evidence import (
    SimulatedEvidenceSource,
    StaticEvidenceSource,
    TestEvidence,
)
from app.services.change_risk.graph import STAGES, StageName
from app.services.change_risk.state import TERMINAL_STEP, WorkflowState

__all__ = [
    "Ctx",
    "build_context",
    "WorkflowEngine",
    "is_terminal",
    "validate_change_request",
    "ChangeRiskError",
    "EvaluatorError",
    "NoActiveSessionError",
    "ReferenceDataError",
    "StaleStateError",
    "TerminalStateError",
    "ValidationError",
    "SimulatedEvidenceSource",
    "StaticEvidenceSource",
    "TestEvidence",
    "STAGES",
    "StageName",
    "TERMINAL_STEP",
    "WorkflowState",
]
