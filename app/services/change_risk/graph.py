"""
Change Risk Workflow Graph.

The workflow is a fixed chain of stages. STAGES maps each step number to the
stage that produces it; intake runs on submit (step 1) and every advance runs
the stage for the next step until TERMINAL_STEP.

Each stage is compiled into its own single-node LangGraph StateGraph so that
one call runs exactly one stage, and LangGraph folds the stage's update into
the state through the reducers declared on WorkflowState.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict

from langgraph.graph import END, START, StateGraph
from langgraph.runtime import Runtime

from app.schemas.change_request import ChangeRequest
from app.services.change_risk.context import Ctx, StageRun
from app.services.change_risk.nodes import (
    intake_evaluation,
    historical_analysis,
    testing_validation,
    conflict_detection,
    edge_case_handling,
    final_recommendation,
)
from app.services.change_risk.state import TERMINAL_STEP, WorkflowState

StageFn = Callable[[ChangeRequest, WorkflowState, Ctx], dict]


class StageName(str, Enum):
    """Stage identifiers, in workflow order."""

    INTAKE = "intake"
    HISTORICAL = "historical"
    TESTING = "testing"
    CONFLICTS = "conflicts"
    EDGE_CASES = "edge_cases"
    FINAL = "final"


def as_node(evaluate: StageFn) -> Callable[..., dict]:
    """Adapt a stage evaluator to a LangGraph node.

    Sequence values are turned into tuples to match the state's tuple
    channels, and the produced step is recorded as current_step.
    """

    def node(state: WorkflowState, runtime: Runtime[StageRun]) -> dict:
        run = runtime.context
        update = evaluate(run.request, state, run.ctx)
        update = {
            key: tuple(value) if isinstance(value, list) else value
            for key, value in update.items()
        }
        update["current_step"] = run.step
        return update

    node.__name__ = evaluate.__name__
    return node


def build_stage_graph(name: StageName, evaluate: StageFn) -> Any:
    """Compile START -> <stage> -> END."""
    # 1. Initialize Graph with context schema
    workflow = StateGraph(WorkflowState, context_schema=StageRun)

    # 2. Add Node and Edges
    workflow.add_node(name.value, as_node(evaluate))
    workflow.add_edge(START, name.value)
    workflow.add_edge(name.value, END)

    # 3. Compile
    return workflow.compile()


@dataclass(frozen=True)
class Stage:
    """A workflow stage: its name, display title, evaluator and graph."""

    name: StageName
    title: str
    evaluate: StageFn
    graph: Any

    def run(
        self, request: ChangeRequest, state: WorkflowState, ctx: Ctx, step: int
    ) -> WorkflowState:
        """Invoke the stage graph on *state* and return the new state."""
        result = self.graph.invoke(
            dict(state), context=StageRun(request=request, ctx=ctx, step=step)
        )
        return WorkflowState.model_validate(result)


def _stage(name: StageName, title: str, evaluate: StageFn) -> Stage:
    return Stage(name, title, evaluate, build_stage_graph(name, evaluate))


# 1. Register stages by the step they produce
STAGES: Dict[int, Stage] = {
    1: _stage(StageName.INTAKE, "Input Collection and Initial Analysis", intake_evaluation),
    2: _stage(StageName.HISTORICAL, "Historical Analysis", historical_analysis),
    3: _stage(StageName.TESTING, "Testing and Mitigation Validation", testing_validation),
    4: _stage(StageName.CONFLICTS, "Conflict Detection", conflict_detection),
    5: _stage(StageName.EDGE_CASES, "Handling Edge Cases", edge_case_handling),
    6: _stage(StageName.FINAL, "Final Recommendation", final_recommendation),
}

# 2. The chain must cover every step exactly once
if sorted(STAGES) != list(range(1, TERMINAL_STEP + 1)):
    raise RuntimeError(f"STAGES must cover steps 1..{TERMINAL_STEP}")
if [stage.name for _, stage in sorted(STAGES.items())] != list(StageName):
    raise RuntimeError("STAGES must follow StageName order")

INTAKE_STEP = 1


def stage_for_step(step: int) -> Stage:
    """Stage that produces *step*. Raises KeyError outside 1..TERMINAL_STEP."""
    return STAGES[step]
