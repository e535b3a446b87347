from __future__ import annotations

import pytest

from app.services.task_interview.models import InterviewPhase
from app.services.task_interview.state_analyzer import (
    KeywordInterviewClassifier,
    analyze_interview_state,
    questions_needed,
)


def test_empty_history_is_init() -> None:
    state = analyze_interview_state([])

    assert state.phase is InterviewPhase.INIT
    assert state.topics_covered == []
    assert state.questions_needed == 3


def test_history_without_topics_is_priority() -> None:
    assert analyze_interview_state(["hello there"]).phase is InterviewPhase.PRIORITY


@pytest.mark.parametrize(
    "history, expected",
    [
        (["this is urgent"], InterviewPhase.CONTEXT),
        (["this is urgent", "it is complex"], InterviewPhase.SCHEDULING),
        (["this is urgent", "it is complex", "mornings work best"], InterviewPhase.FOLLOWUP),
        (
            ["this is urgent", "it is complex", "mornings work best", "ok", "ok", "ok", "ok", "ok"],
            InterviewPhase.READY,
        ),
    ],
)
def test_phase_ladder(history, expected) -> None:
    assert analyze_interview_state(history).phase is expected


def test_topics_match_substrings_anywhere() -> None:
    state = analyze_interview_state(["The afternoon works"])

    # "afternoon" also contains "after"
    assert state.topics_covered == ["dependencies", "scheduling"]


def test_phase_is_recomputed_from_scratch() -> None:
    classifier = KeywordInterviewClassifier()
    later = classifier.classify(["this is urgent", "it is complex"], task_count=2)
    edited = classifier.classify(["let's chat"], task_count=2)

    assert later.phase is InterviewPhase.SCHEDULING
    assert edited.phase is InterviewPhase.PRIORITY


@pytest.mark.parametrize("length, expected", [(0, 3), (2, 3), (4, 2), (6, 1), (20, 1)])
def test_questions_needed_is_clamped(length, expected) -> None:
    assert questions_needed(length) == expected


def test_custom_keyword_families() -> None:
    classifier = KeywordInterviewClassifier({"priority": ("asap",), "complexity": ("hard",)})

    state = classifier.classify(["ASAP please, it's hard"], task_count=1)

    assert state.topics_covered == ["priority", "complexity"]
    assert state.phase is InterviewPhase.SCHEDULING
