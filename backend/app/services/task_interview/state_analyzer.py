"""Heuristic classification of interview progress from raw conversation history."""
from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from app.services.task_interview.models import InterviewPhase, InterviewState

TOPIC_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "priority": ("priority", "important", "urgent"),
    "complexity": ("complex", "time", "estimate"),
    "dependencies": ("depend", "before", "after"),
    "scheduling": ("morning", "afternoon", "schedule"),
}

READY_MIN_TURNS = 8


class InterviewStateClassifier:
    """Interface for anything that maps conversation history to an interview state."""

    def classify(self, history: Sequence[str], task_count: int) -> InterviewState:
        raise NotImplementedError


class KeywordInterviewClassifier(InterviewStateClassifier):
    """Substring keyword matcher over the whole history.

    State is recomputed from scratch on every call, so editing earlier turns can
    move the phase backwards.
    """

    def __init__(self, topic_keywords: Dict[str, Tuple[str, ...]] | None = None) -> None:
        self._topic_keywords = topic_keywords or TOPIC_KEYWORDS

    def classify(self, history: Sequence[str], task_count: int) -> InterviewState:
        turns = list(history or [])
        blob = join_history(turns)
        topics = self._covered_topics(blob)
        return InterviewState(
            phase=_phase_for(turns, topics),
            topics_covered=topics,
            questions_needed=questions_needed(len(turns)),
        )

    def _covered_topics(self, blob: str) -> List[str]:
        return [
            topic
            for topic, keywords in self._topic_keywords.items()
            if any(keyword in blob for keyword in keywords)
        ]


def join_history(history: Sequence[str]) -> str:
    return " ".join(history or []).lower()


def questions_needed(history_length: int) -> int:
    return max(1, min(3, 4 - history_length // 2))


def _phase_for(turns: List[str], topics: List[str]) -> InterviewPhase:
    if not turns:
        return InterviewPhase.INIT
    if not topics:
        return InterviewPhase.PRIORITY
    if "complexity" not in topics:
        return InterviewPhase.CONTEXT
    if "scheduling" not in topics:
        return InterviewPhase.SCHEDULING
    if len(turns) < READY_MIN_TURNS:
        return InterviewPhase.FOLLOWUP
    return InterviewPhase.READY


_default_classifier = KeywordInterviewClassifier()


def analyze_interview_state(history: Sequence[str] | None, task_count: int = 0) -> InterviewState:
    """Classify ``history`` with the default keyword classifier."""
    return _default_classifier.classify(history or [], task_count)
