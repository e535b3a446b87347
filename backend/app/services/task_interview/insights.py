"""Readiness scoring, risk/optimisation hints, and next-step synthesis."""
from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from app.services.task_interview.models import (
    ConversationInsights,
    InterviewPhase,
    InterviewState,
    TaskInterviewInput,
)
from app.services.task_interview.session_store.base import InterviewSessionRecord
from app.services.task_interview.state_analyzer import join_history

MAX_TASKS_BEFORE_RISK = 10
MAX_TURNS_BEFORE_RISK = 15
STALLED_TURNS = 3
MAX_NEXT_STEPS = 4

CONFUSION_KEYWORDS = ("confused", "don't understand")
EFFICIENCY_KEYWORDS = ("busy", "quick")

RISK_NO_TASKS = "No tasks provided for planning"
RISK_TOO_MANY_TASKS = "Too many tasks may overwhelm the interview process"
RISK_LONG_CONVERSATION = "Conversation is getting long; the user may lose engagement"
RISK_NO_PROGRESS = "Not making progress on key interview topics"
RISK_PHASE_REGRESSED = "Interview moved back to an earlier phase since the last turn"

HINT_READY = "Good coverage of topics, ready to generate the final plan"
HINT_CONFUSED = "User seems confused; ask clearer questions with examples"
HINT_EFFICIENT = "User prefers efficiency; focus on essential questions only"

PHASE_STEPS: Dict[InterviewPhase, Tuple[str, str]] = {
    InterviewPhase.INIT: (
        "Continue gathering priority information",
        "Ask follow-up questions about urgent tasks",
    ),
    InterviewPhase.PRIORITY: (
        "Continue gathering priority information",
        "Ask follow-up questions about urgent tasks",
    ),
    InterviewPhase.CONTEXT: (
        "Gather more context about task complexity",
        "Identify dependencies between tasks",
    ),
    InterviewPhase.SCHEDULING: (
        "Finalise scheduling preferences",
        "Estimate time requirements for tasks",
    ),
    InterviewPhase.FOLLOWUP: (
        "Address any remaining ambiguities",
        "Prepare for final plan generation",
    ),
    InterviewPhase.READY: (
        "Generate calendar entries based on the task plan",
        "Set up task tracking and progress monitoring",
    ),
}

READY_BAND = 80
NEARLY_READY_BAND = 60
STEP_COMPLETE = "Interview complete - ready for task execution planning"
STEP_NEARLY_COMPLETE = "Interview mostly complete - gather any final details"
STEP_CONTINUE = "Continue the interview to gather more essential information"
STEP_DEFAULT = "Continue conversational task planning"


def get_conversation_insights(
    interview_input: TaskInterviewInput,
    state: InterviewState,
    previous: Optional[InterviewSessionRecord] = None,
) -> ConversationInsights:
    history = interview_input.conversation_history
    blob = join_history(history)
    task_count = len(interview_input.tasks)

    risks: List[str] = []
    if task_count == 0:
        risks.append(RISK_NO_TASKS)
    if task_count > MAX_TASKS_BEFORE_RISK:
        risks.append(RISK_TOO_MANY_TASKS)
    if len(history) > MAX_TURNS_BEFORE_RISK:
        risks.append(RISK_LONG_CONVERSATION)
    if not state.topics_covered and len(history) > STALLED_TURNS:
        risks.append(RISK_NO_PROGRESS)
    if previous is not None and _phase_regressed(previous.interview_phase, state.phase):
        risks.append(RISK_PHASE_REGRESSED)

    hints: List[str] = []
    if state.phase is InterviewPhase.READY and len(state.topics_covered) >= 2:
        hints.append(HINT_READY)
    if any(keyword in blob for keyword in CONFUSION_KEYWORDS):
        hints.append(HINT_CONFUSED)
    if any(keyword in blob for keyword in EFFICIENCY_KEYWORDS):
        hints.append(HINT_EFFICIENT)

    return ConversationInsights(
        risk_factors=risks,
        optimization_suggestions=hints,
        readiness_score=readiness_score(interview_input, state),
    )


def readiness_score(interview_input: TaskInterviewInput, state: InterviewState) -> int:
    """Additive 0-100 estimate of how complete the interview is."""
    score = 0
    score += min(30, len(state.topics_covered) * 10)
    score += min(20, len(interview_input.conversation_history) * 3)
    score += 15 if interview_input.user_preferences is not None else 0
    score += 15 if interview_input.tasks else 0
    score += min(20, sum(1 for task in interview_input.tasks if task.due) * 5)
    return max(0, min(100, score))


def generate_next_steps(phase: InterviewPhase, insights: ConversationInsights) -> List[str]:
    steps: List[str] = list(PHASE_STEPS.get(phase, ()))
    if insights.risk_factors:
        steps.append(f"Address potential issues: {insights.risk_factors[0]}")
    if insights.optimization_suggestions:
        steps.append(insights.optimization_suggestions[0])

    if insights.readiness_score >= READY_BAND:
        steps.append(STEP_COMPLETE)
    elif insights.readiness_score >= NEARLY_READY_BAND:
        steps.append(STEP_NEARLY_COMPLETE)
    else:
        steps.append(STEP_CONTINUE)

    if not steps:
        steps.append(STEP_DEFAULT)
    return steps[:MAX_NEXT_STEPS]


def _phase_regressed(previous_phase: Optional[str], current: InterviewPhase) -> bool:
    try:
        previous = InterviewPhase(previous_phase)
    except ValueError:
        return False
    return previous.rank > current.rank
