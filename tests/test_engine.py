from datetime import datetime, timedelta, timezone

import pytest

from app.schemas.change_request import RiskLevel
from app.services.change_risk import (
    EvaluatorError,
    NoActiveSessionError,
    StaleStateError,
    StaticEvidenceSource,
    TERMINAL_STEP,
    TerminalStateError,
    ValidationError,
    WorkflowEngine,
    is_terminal,
)
from app.services.change_risk.graph import STAGES, StageName


def run_to_end(engine, state):
    states = [state]
    while not engine.is_terminal(states[-1]):
        states.append(engine.advance(states[-1]))
    return states


def test_stage_table_covers_every_step():
    assert sorted(STAGES) == list(range(1, TERMINAL_STEP + 1))
    assert [STAGES[step].name for step in sorted(STAGES)] == list(StageName)


def test_submit_runs_intake(engine, make_request):
    state = engine.submit(make_request())

    assert state.current_step == 1
    assert state.risk_factors
    assert state.recommendations
    assert state.completed_stages == ("intake",)
    assert engine.state is state


def test_submit_accepts_mapping(engine, make_request):
    data = make_request().model_dump()
    assert engine.submit(data).current_step == 1


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"planned_end": datetime(2025, 7, 15, 22, 0)}, "planned_end"),
        ({"planned_end": datetime(2025, 7, 15, 21, 0)}, "planned_end"),
        ({"title": "   "}, "title"),
        ({"business_application_group": ""}, "business_application_group"),
    ],
)
def test_submit_rejects_invalid_requests(engine, make_request, overrides, message):
    with pytest.raises(ValidationError) as exc_info:
        engine.submit(make_request(**overrides))
    assert any(message in err for err in exc_info.value.errors)
    assert engine.state is None


def test_submit_rejects_unparsable_mapping(engine, make_request):
    data = make_request().model_dump()
    data["change_type"] = "sideways"
    with pytest.raises(ValidationError) as exc_info:
        engine.submit(data)
    assert any(err.startswith("change_type") for err in exc_info.value.errors)


def test_advance_steps_by_one_until_terminal(engine, make_request):
    states = run_to_end(engine, engine.submit(make_request()))

    assert [s.current_step for s in states] == [1, 2, 3, 4, 5, 6]
    assert is_terminal(states[-1])
    assert not any(is_terminal(s) for s in states[:-1])
    with pytest.raises(TerminalStateError):
        engine.advance(states[-1])
    assert engine.state is states[-1]


def test_factors_and_recommendations_only_grow(engine, make_request):
    states = run_to_end(engine, engine.submit(make_request(change_type="emergency")))

    for before, after in zip(states, states[1:]):
        n = len(before.risk_factors)
        m = len(before.recommendations)
        assert after.risk_factors[:n] == before.risk_factors
        assert after.recommendations[:m] == before.recommendations
        assert len(after.risk_factors) > n
        assert len(after.recommendations) > m


def test_advance_returns_new_state(engine, make_request):
    first = engine.submit(make_request())
    second = engine.advance(first)

    assert second is not first
    assert first.current_step == 1
    assert first.completed_stages == ("intake",)
    assert second.completed_stages == ("intake", "historical")


def test_verdict_is_replaced_not_maximised(make_ctx, make_request):
    # Emergency -> HIGH at intake, then a clean emergency history -> LOW.
    engine = WorkflowEngine(make_ctx())
    state = engine.submit(
        make_request(business_application_group="Billing", change_type="emergency")
    )
    assert state.risk_level == RiskLevel.HIGH

    state = engine.advance(state)
    assert state.risk_level == RiskLevel.LOW
    assert "Emergency change type automatically elevates risk" in state.risk_factors


def test_full_run_recommends_delay_on_conflict(engine, make_request):
    # Sample request overlaps CHG0010101 on the calendar.
    states = run_to_end(engine, engine.submit(make_request()))
    levels = [s.risk_level for s in states]

    assert levels == [
        RiskLevel.LOW,  # intake: declared low
        RiskLevel.MEDIUM,  # historical: resolved incident
        RiskLevel.LOW,  # testing: evidence and pass
        RiskLevel.HIGH,  # conflicts
        RiskLevel.HIGH,  # standard approval keeps verdict
        RiskLevel.HIGH,  # final
    ]
    final = states[-1]
    assert [c.id for c in final.conflicting_changes] == ["CHG0010101"]
    assert "Recommended action: Delay or revise change" in final.recommendations


def test_evaluator_failure_leaves_state_untouched(make_ctx, make_request, reference):
    class FlakyHistory:
        def __init__(self):
            self.fail = True

        def query_similar_changes(self, group, change_type):
            if self.fail:
                raise ConnectionError("change log unavailable")
            return reference.query_similar_changes(group, change_type)

    history = FlakyHistory()
    engine = WorkflowEngine(make_ctx(history=history))
    state = engine.submit(make_request())

    with pytest.raises(EvaluatorError) as exc_info:
        engine.advance(state)
    assert exc_info.value.stage == "historical"
    assert exc_info.value.step == 2
    assert isinstance(exc_info.value.__cause__, ConnectionError)
    assert engine.state is state

    history.fail = False
    assert engine.advance(state).current_step == 2


def test_reset_then_submit_starts_fresh(engine, make_request):
    state = engine.submit(make_request(change_type="emergency", declared_risk="high"))
    for _ in range(3):
        state = engine.advance(state)
    assert state.current_step == 4

    engine.reset()
    assert engine.state is None
    assert engine.request is None

    fresh_request = make_request(
        planned_start=datetime(2025, 7, 16, 2, 0),
        planned_end=datetime(2025, 7, 16, 4, 0),
    )
    fresh = engine.submit(fresh_request)
    expected = WorkflowEngine(engine.ctx).submit(fresh_request)

    assert fresh.current_step == 1
    assert fresh.risk_factors == expected.risk_factors
    assert fresh.recommendations == expected.recommendations
    assert fresh.session_id != state.session_id


def test_advance_without_session(engine, make_request):
    state = engine.submit(make_request())
    engine.reset()
    with pytest.raises(NoActiveSessionError):
        engine.advance(state)


def test_advance_rejects_state_from_previous_session(engine, make_request):
    old = engine.submit(make_request())
    engine.submit(make_request(title="Another change"))
    with pytest.raises(NoActiveSessionError):
        engine.advance(old)


def test_sessions_are_isolated(make_ctx, make_request):
    ctx = make_ctx(evidence=StaticEvidenceSource(has_evidence=True, passed=False))
    first, second = WorkflowEngine(ctx), WorkflowEngine(ctx)

    a = first.advance(first.submit(make_request()))
    b = second.submit(make_request(change_type="emergency"))

    assert a.current_step == 2
    assert b.current_step == 1
    assert a.session_id != b.session_id
    assert "Emergency change type automatically elevates risk" not in a.risk_factors


def test_advance_rejects_superseded_state(engine, make_request):
    first = engine.submit(make_request())
    state = first
    for _ in range(3):
        state = engine.advance(state)
    assert engine.state.current_step == 4

    with pytest.raises(StaleStateError) as exc_info:
        engine.advance(first)
    assert exc_info.value.current_step == 4
    assert engine.state is state

    # Still a NoActiveSessionError for callers that only handle that.
    with pytest.raises(NoActiveSessionError):
        engine.advance(first)


def test_submit_rejects_mixed_timezone_awareness(engine, make_request):
    request = make_request(
        planned_start=datetime(2025, 7, 15, 22, 0, tzinfo=timezone.utc),
        planned_end=datetime(2025, 7, 16, 3, 0),
    )
    with pytest.raises(ValidationError) as exc_info:
        engine.submit(request)
    assert any(err.startswith("planned_end") for err in exc_info.value.errors)
    assert engine.state is None


def test_submit_rejects_differing_offsets(engine, make_request):
    request = make_request(
        planned_start=datetime(2025, 7, 15, 22, 0, tzinfo=timezone.utc),
        planned_end=datetime(2025, 7, 16, 3, 0, tzinfo=timezone(timedelta(hours=2))),
    )
    with pytest.raises(ValidationError):
        engine.submit(request)


def test_offset_timestamps_run_as_local_time(engine, make_request):
    offset = timezone(timedelta(hours=-5))
    state = engine.submit(
        make_request(
            planned_start=datetime(2025, 7, 15, 22, 0, tzinfo=offset),
            planned_end=datetime(2025, 7, 16, 3, 0, tzinfo=offset),
        )
    )
    assert engine.request.planned_start == datetime(2025, 7, 15, 22, 0)

    states = run_to_end(engine, state)
    # Same wall-clock interval as the sample request, so the same conflict.
    assert [c.id for c in states[-1].conflicting_changes] == ["CHG0010101"]
