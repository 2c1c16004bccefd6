from typing import List, Optional

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from app.core.logging import get_logger
from app.dependencies.assessments import RegistryDep
from app.schemas.change_request import ChangeRequest
from app.services.change_risk.engine import WorkflowEngine
from app.services.change_risk.errors import (
    EvaluatorError,
    NoActiveSessionError,
    TerminalStateError,
    ValidationError,
)
from app.services.change_risk.graph import STAGES
from app.services.change_risk.nodes.final import recommended_action
from app.services.change_risk.registry import AssessmentNotFoundError
from app.services.change_risk.state import WorkflowState

router = APIRouter()
logger = get_logger(__name__)


class StageInfo(BaseModel):
    """A workflow stage as listed by the API."""

    step: int
    name: str
    title: str


class AssessmentResponse(BaseModel):
    """Current state of an assessment."""

    assessment_id: str
    state: WorkflowState
    stage: Optional[StageInfo] = Field(
        default=None, description="Stage that produced the current step."
    )
    terminal: bool
    recommended_action: Optional[str] = Field(
        default=None, description="Set once the final stage has run."
    )


def _stage_info(step: int) -> StageInfo:
    stage = STAGES[step]
    return StageInfo(step=step, name=stage.name.value, title=stage.title)


def _to_response(assessment_id: str, engine: WorkflowEngine) -> AssessmentResponse:
    state = engine.state
    if state is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Assessment {assessment_id} has no submitted change",
        )
    return AssessmentResponse(
        assessment_id=assessment_id,
        state=state,
        stage=_stage_info(state.current_step) if state.current_step else None,
        terminal=state.is_terminal,
        recommended_action=(
            recommended_action(state.risk_level) if state.is_terminal else None
        ),
    )


def _get_engine(registry: RegistryDep, assessment_id: str) -> WorkflowEngine:
    try:
        return registry.get(assessment_id)
    except AssessmentNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Assessment {assessment_id} not found",
        ) from None


@router.get("/stages", response_model=List[StageInfo])
def list_stages():
    """List the workflow stages in order."""
    return [_stage_info(step) for step in sorted(STAGES)]


@router.post(
    "", response_model=AssessmentResponse, status_code=status.HTTP_201_CREATED
)
def submit_change_request(request: ChangeRequest, registry: RegistryDep):
    """
    Submit a change request and run the intake stage.

    Args:
        request: The change request to assess.

    Returns:
        The new assessment at step 1.
    """
    assessment_id, engine = registry.create()
    try:
        engine.submit(request)
    except ValidationError as e:
        registry.discard(assessment_id)
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.errors
        ) from e
    except EvaluatorError as e:
        registry.discard(assessment_id)
        logger.error("Intake failed for new assessment: %s", e)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"stage": e.stage, "step": e.step, "message": str(e)},
        ) from e
    return _to_response(assessment_id, engine)


@router.get("/{assessment_id}", response_model=AssessmentResponse)
def get_assessment(assessment_id: str, registry: RegistryDep):
    """Get the current state of an assessment."""
    return _to_response(assessment_id, _get_engine(registry, assessment_id))


@router.post("/{assessment_id}/advance", response_model=AssessmentResponse)
def advance_assessment(assessment_id: str, registry: RegistryDep):
    """Run the next stage of an assessment."""
    try:
        with registry.locked(assessment_id) as engine:
            if engine.state is None:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail=f"Assessment {assessment_id} has no submitted change",
                )
            try:
                engine.advance(engine.state)
            except TerminalStateError as e:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT, detail=str(e)
                ) from e
            except NoActiveSessionError as e:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT, detail=str(e)
                ) from e
            except EvaluatorError as e:
                logger.error("Advance failed for assessment %s: %s", assessment_id, e)
                raise HTTPException(
                    status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                    detail={"stage": e.stage, "step": e.step, "message": str(e)},
                ) from e
            return _to_response(assessment_id, engine)
    except AssessmentNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Assessment {assessment_id} not found",
        ) from None


@router.delete("/{assessment_id}", status_code=status.HTTP_204_NO_CONTENT)
def reset_assessment(assessment_id: str, registry: RegistryDep):
    """Reset an assessment and discard its state."""
    try:
        registry.discard(assessment_id)
    except AssessmentNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Assessment {assessment_id} not found",
        ) from None
