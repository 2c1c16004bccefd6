"""
Change risk workflow engine.

Owns one assessment session: the submitted ChangeRequest and its latest
WorkflowState. All calls are synchronous; a stage either commits completely
or leaves the state as it was.
"""

from typing import Any, Mapping, Optional, Union

import pydantic

from app.core.logging import get_logger, session_logger
from app.schemas.change_request import REQUIRED_TEXT_FIELDS, ChangeRequest
from app.services.change_risk.context import Ctx, build_context
from app.services.change_risk.errors import (
    EvaluatorError,
    NoActiveSessionError,
    StaleStateError,
    TerminalStateError,
    ValidationError,
)
from app.services.change_risk.graph import INTAKE_STEP, Stage, stage_for_step
from app.services.change_risk.state import WorkflowState

logger = get_logger(__name__)


def validate_change_request(
    request: Union[ChangeRequest, Mapping[str, Any]],
) -> ChangeRequest:
    """
    Parse and check a change request.

    Raises:
        ValidationError: On unparsable input, blank required fields, mixed
            or differing UTC offsets, or an end that is not after the start.

    Timestamps with a UTC offset are returned as local wall-clock times.
    """
    if not isinstance(request, ChangeRequest):
        try:
            request = ChangeRequest.model_validate(request)
        except pydantic.ValidationError as e:
            errors = [
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                for err in e.errors()
            ]
            raise ValidationError("Invalid change request", errors) from e

    errors = [
        f"{name}: must not be empty"
        for name in REQUIRED_TEXT_FIELDS
        if not getattr(request, name).strip()
    ]
    start, end = request.planned_start, request.planned_end
    start_offset, end_offset = start.utcoffset(), end.utcoffset()
    if (start_offset is None) != (end_offset is None):
        errors.append(
            "planned_end: must carry a UTC offset if and only if planned_start does"
        )
    elif start_offset != end_offset:
        errors.append("planned_end: must use the same UTC offset as planned_start")
    elif start >= end:
        errors.append("planned_end: must be after planned_start")
    if errors:
        raise ValidationError("Invalid change request", errors)

    if start_offset is not None:
        # Stages compare local wall-clock times, as the reference data does.
        request = request.model_copy(
            update={
                "planned_start": start.replace(tzinfo=None),
                "planned_end": end.replace(tzinfo=None),
            }
        )
    return request


def is_terminal(state: WorkflowState) -> bool:
    """True once the final stage has run."""
    return state.is_terminal


class WorkflowEngine:
    """
    Drives one change risk assessment through its stages.

    Usage:
        engine = WorkflowEngine(build_context())
        state = engine.submit(request)
        while not engine.is_terminal(state):
            state = engine.advance(state)
    """

    def __init__(self, ctx: Optional[Ctx] = None):
        self.ctx = ctx or build_context()
        self._request: Optional[ChangeRequest] = None
        self._state: Optional[WorkflowState] = None

    @property
    def request(self) -> Optional[ChangeRequest]:
        return self._request

    @property
    def state(self) -> Optional[WorkflowState]:
        return self._state

    @staticmethod
    def is_terminal(state: WorkflowState) -> bool:
        return is_terminal(state)

    def submit(
        self, request: Union[ChangeRequest, Mapping[str, Any]]
    ) -> WorkflowState:
        """
        Start a new assessment, replacing any current one.

        Runs the intake stage and returns the step-1 state.

        Raises:
            ValidationError: If the request is invalid. The previous session
                is kept in that case.
            EvaluatorError: If the intake stage fails.
        """
        request = validate_change_request(request)
        fresh = WorkflowState()
        state = self._run_stage(
            stage_for_step(INTAKE_STEP), INTAKE_STEP, request, fresh
        )

        self._request = request
        self._state = state
        session_logger(logger, state.session_id).info(
            "Submitted change %r (%s, %s): initial risk %s",
            request.title,
            request.change_type.value,
            request.business_application_group,
            state.risk_level.value,
        )
        return state

    def advance(self, state: WorkflowState) -> WorkflowState:
        """
        Run the next stage on *state* and return the resulting new state.

        *state* itself is never modified.

        Raises:
            TerminalStateError: If *state* is already terminal.
            NoActiveSessionError: If nothing was submitted or *state* belongs
                to another session.
            StaleStateError: If *state* is not the latest committed state.
            EvaluatorError: If the stage fails; the engine keeps its last
                committed state.
        """
        if self._request is None or self._state is None:
            raise NoActiveSessionError("No change request has been submitted")
        if state.session_id != self._state.session_id:
            raise NoActiveSessionError(
                f"State belongs to session {state.session_id}, "
                f"not the active session {self._state.session_id}"
            )
        if state.current_step != self._state.current_step:
            raise StaleStateError(state.current_step, self._state.current_step)
        if is_terminal(state):
            raise TerminalStateError(state.current_step)

        next_step = state.current_step + 1
        new_state = self._run_stage(
            stage_for_step(next_step), next_step, self._request, state
        )
        self._state = new_state

        session_logger(logger, new_state.session_id).info(
            "Advanced to step %d (%s): risk %s",
            next_step,
            stage_for_step(next_step).name.value,
            new_state.risk_level.value,
        )
        return new_state

    def reset(self) -> None:
        """Discard the current assessment."""
        if self._state is not None:
            session_logger(logger, self._state.session_id).info("Session reset")
        self._request = None
        self._state = None

    def _run_stage(
        self,
        stage: Stage,
        step: int,
        request: ChangeRequest,
        state: WorkflowState,
    ) -> WorkflowState:
        """Run *stage* on *state* and return the resulting new state."""
        try:
            return stage.run(request, state, self.ctx, step)
        except Exception as e:
            logger.error(
                "Stage %s (step %d) failed: %s",
                stage.name.value,
                step,
                e,
                exc_info=True,
            )
            raise EvaluatorError(stage.name.value, step, str(e)) from e
