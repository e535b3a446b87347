from __future__ import annotations

import pytest

from app.services.task_interview.insights import (
    HINT_CONFUSED,
    HINT_EFFICIENT,
    HINT_READY,
    RISK_LONG_CONVERSATION,
    RISK_NO_PROGRESS,
    RISK_NO_TASKS,
    RISK_PHASE_REGRESSED,
    RISK_TOO_MANY_TASKS,
    STEP_COMPLETE,
    generate_next_steps,
    get_conversation_insights,
    readiness_score,
)
from app.services.task_interview.models import Task, TaskInterviewInput, UserPreferences
from app.services.task_interview.session_store.base import InterviewSessionRecord
from app.services.task_interview.state_analyzer import analyze_interview_state


def _insights(data: TaskInterviewInput, previous=None):
    state = analyze_interview_state(data.conversation_history, len(data.tasks))
    return state, get_conversation_insights(data, state, previous)


def test_too_many_tasks_risk_reaches_next_steps() -> None:
    data = TaskInterviewInput(tasks=[Task(id=str(index), title=f"Task {index}") for index in range(15)])

    state, insights = _insights(data)
    steps = generate_next_steps(state.phase, insights)

    assert RISK_TOO_MANY_TASKS in insights.risk_factors
    assert f"Address potential issues: {RISK_TOO_MANY_TASKS}" in steps
    assert 1 <= len(steps) <= 4
    assert insights.readiness_score == 15


def test_empty_task_list_is_a_risk() -> None:
    _, insights = _insights(TaskInterviewInput(conversation_history=["hello"]))

    assert insights.risk_factors == [RISK_NO_TASKS]


def test_long_and_stalled_conversations() -> None:
    data = TaskInterviewInput(tasks=[Task(id="t1", title="Task")], conversation_history=["ok"] * 16)

    _, insights = _insights(data)

    assert RISK_LONG_CONVERSATION in insights.risk_factors
    assert RISK_NO_PROGRESS in insights.risk_factors


def test_user_signals_become_hints() -> None:
    data = TaskInterviewInput(
        tasks=[Task(id="t1", title="Task")],
        conversation_history=["I'm confused", "keep it quick"],
    )

    _, insights = _insights(data)

    assert insights.optimization_suggestions == [HINT_CONFUSED, HINT_EFFICIENT]


def test_phase_regression_against_previous_turn() -> None:
    data = TaskInterviewInput(tasks=[Task(id="t1", title="Task")], conversation_history=["hi"])
    previous = InterviewSessionRecord(session_key="s1", last_update="2026-10-19T08:00:00+00:00", interview_phase="SCHEDULING")

    _, insights = _insights(data, previous)

    assert RISK_PHASE_REGRESSED in insights.risk_factors


def test_full_readiness() -> None:
    history = [
        "this is urgent",
        "it is complex",
        "it depends on the API",
        "mornings are best for me",
        "ok",
        "ok",
        "ok",
        "ok",
    ]
    data = TaskInterviewInput(
        tasks=[Task(id=str(index), title=f"Task {index}", due="2026-10-25") for index in range(4)],
        conversation_history=history,
        user_preferences=UserPreferences(),
    )

    state, insights = _insights(data)
    steps = generate_next_steps(state.phase, insights)

    assert insights.readiness_score == 100
    assert insights.optimization_suggestions == [HINT_READY]
    assert steps[-1] == STEP_COMPLETE
    assert len(steps) == 4


def test_readiness_score_is_bounded() -> None:
    _, empty = _insights(TaskInterviewInput())

    assert empty.readiness_score == 0


@pytest.mark.parametrize("already_due", [0, 1, 3, 4, 6])
def test_adding_a_due_date_never_lowers_readiness(already_due) -> None:
    due_tasks = [Task(id=f"d{index}", title=f"Due {index}", due="2026-10-25") for index in range(already_due)]
    history = ["this is urgent"]

    def score(extra: Task) -> int:
        data = TaskInterviewInput(tasks=[*due_tasks, extra], conversation_history=history)
        return readiness_score(data, analyze_interview_state(history, len(data.tasks)))

    without_due = score(Task(id="x", title="Undated"))
    with_due = score(Task(id="x", title="Undated", due="2026-10-30"))

    assert with_due >= without_due
    if already_due >= 4:
        assert with_due == without_due
    else:
        assert with_due == without_due + 5
