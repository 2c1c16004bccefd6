"""
Errors raised by the change risk engine.

All of them are recoverable by the caller: fix and resubmit, or retry the
advance once the failing dependency is back.
"""

from typing import Optional


class ChangeRiskError(Exception):
    """Base class for engine errors."""


class ValidationError(ChangeRiskError):
    """The submitted change request is malformed or inconsistent."""

    def __init__(self, message: str, errors: Optional[list] = None):
        super().__init__(message)
        self.errors = errors or [message]


class TerminalStateError(ChangeRiskError):
    """Advance was requested on a workflow that already reached its final step."""

    def __init__(self, step: int):
        super().__init__(f"Workflow is terminal at step {step}; nothing to advance.")
        self.step = step


class EvaluatorError(ChangeRiskError):
    """A stage failed to complete; the workflow state was left untouched."""

    def __init__(self, stage: str, step: int, message: str):
        super().__init__(f"Stage '{stage}' (step {step}) failed: {message}")
        self.stage = stage
        self.step = step


class NoActiveSessionError(ChangeRiskError):
    """Advance was called without a submitted request, or with a foreign state."""


class ReferenceDataError(ChangeRiskError):
    """Reference data could not be loaded or parsed."""


class StaleStateError(NoActiveSessionError):
    """Advance was called with a state the session has already moved past."""

    def __init__(self, step: int, current_step: int):
        super().__init__(
            f"State is at step {step}, but the session is at step {current_step}"
        )
        self.step = step
        self.current_step = current_step
