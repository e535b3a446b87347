from __future__ import annotations

from datetime import date

from app.services.task_interview.models import InterviewPhase, Task, TaskInterviewInput, UserPreferences
from app.services.task_interview.questions import (
    FOLLOWUP_TRIGGERS,
    candidate_questions_for_phase,
    generate_context_questions,
    generate_followup_questions,
    generate_priority_questions,
    generate_scheduling_questions,
)
from app.services.task_interview.state_analyzer import analyze_interview_state

TODAY = date(2026, 10, 19)


def _task(task_id: str, title: str, **kwargs) -> Task:
    return Task(id=task_id, title=title, **kwargs)


def test_overwhelmed_user_with_overdue_task() -> None:
    overdue = _task("t1", "File taxes", due="2026-10-10T00:00:00.000Z")
    data = TaskInterviewInput(tasks=[overdue], conversation_history=["I'm overwhelmed with work"])

    state = analyze_interview_state(data.conversation_history, len(data.tasks))
    priority = candidate_questions_for_phase(state.phase, data, TODAY)
    followup = candidate_questions_for_phase(InterviewPhase.FOLLOWUP, data, TODAY)

    assert state.phase is InterviewPhase.PRIORITY
    assert priority[0].task_id == "t1"
    assert priority[0].required is True
    assert "File taxes" in priority[0].question
    assert "2026-10-10" in priority[0].question
    assert any("overwhelmed" in question.question for question in followup)


def test_several_tasks_due_this_week_ask_for_ranking() -> None:
    tasks = [
        _task("a", "Send invoice", due="2026-10-20", notes="Client ACME, net 30 terms"),
        _task("b", "Book venue", due="2026-10-22", notes="Need room for thirty people"),
        _task("c", "Plan offsite", due="2026-12-01", notes="Agenda and travel for the team"),
    ]

    questions = generate_priority_questions(tasks, TODAY)

    assert len(questions) == 1
    assert questions[0].options == ["Send invoice", "Book venue"]
    assert questions[0].required is True


def test_vague_task_gets_optional_context_question() -> None:
    questions = generate_priority_questions([_task("t1", "Stuff", notes="tbd")], TODAY)

    assert [question.type for question in questions] == ["context"]
    assert questions[0].required is False


def test_context_questions_cover_complexity_and_dependencies() -> None:
    tasks = [_task(str(index), f"Review PR {index}") for index in range(5)]

    questions = generate_context_questions(tasks)

    assert {question.task_id for question in questions} == {"0", "1", "2"}
    assert [question.type for question in questions[:2]] == ["context", "dependencies"]


def test_scheduling_asks_for_focus_time_unless_preferences_exist() -> None:
    tasks = [_task("t1", "Write design doc", due="2026-10-25")]

    without_prefs = generate_scheduling_questions(tasks)
    with_prefs = generate_scheduling_questions(tasks, UserPreferences(preferred_time_slots=["morning"]))

    assert without_prefs[0].question == "When do you do your best focused work?"
    assert all(question.question != "When do you do your best focused work?" for question in with_prefs)
    assert any("flexible" in question.question for question in with_prefs)


def test_scheduling_flags_substantial_task() -> None:
    task = _task("big", "Migrate the billing service to the new cluster")

    questions = generate_scheduling_questions([task])

    assert questions[-1].task_id == "big"
    assert "How long" in questions[-1].question


def test_followup_triggers_match_history() -> None:
    questions = generate_followup_questions(["I'm tired and the deadline is close"])

    assert [question.type for question in questions] == ["context", "deadline"]


def test_followup_questions_are_copies() -> None:
    question = generate_followup_questions(["so busy"])[0]
    question.options.append("Other")

    assert "Other" not in FOLLOWUP_TRIGGERS[0][1].options


def test_ready_phase_has_no_candidates() -> None:
    data = TaskInterviewInput(tasks=[_task("t1", "Anything")])

    assert candidate_questions_for_phase(InterviewPhase.READY, data, TODAY) == []
