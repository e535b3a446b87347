"""Deterministic plan used when the planning service cannot produce one."""
from __future__ import annotations

from datetime import date
from typing import Optional

from app.services.task_interview.models import Task, TaskInterviewInput
from app.services.task_interview.schema import (
    SuggestedSchedule,
    TaskAnalysis,
    TaskContextBundle,
    TaskPlan,
    TaskQuestion,
)

FALLBACK_SUMMARY = (
    "Fallback task plan generated because the planning service was unavailable. "
    "Basic analysis provided for all tasks."
)
FALLBACK_QUESTION = (
    "The planning service was unavailable. Please review task priorities and estimated durations manually."
)
FALLBACK_NEXT_STEPS = [
    "Planning service was unavailable, using the basic template",
    "Check the OpenAI API configuration",
    "Try regenerating the plan once the service is restored",
]
DEFAULT_DURATION_MIN = 60


def default_task_analysis(task: Task, today: date) -> TaskAnalysis:
    """Neutral verdict for a single task: medium priority, one hour, flexible morning slot."""
    preferred = task.due_date or today
    return TaskAnalysis(
        task_id=task.id,
        title=task.title,
        priority="medium",
        estimated_duration=DEFAULT_DURATION_MIN,
        complexity="moderate",
        dependencies=[],
        suggested_schedule=SuggestedSchedule(
            preferred_date=preferred.isoformat(),
            preferred_time_slot="morning",
            flexibility="flexible",
        ),
        context=TaskContextBundle(),
    )


def build_fallback_task_plan(interview_input: TaskInterviewInput, today: Optional[date] = None) -> TaskPlan:
    today = today or date.today()
    return TaskPlan(
        plan_date=today.isoformat(),
        conversation_summary=FALLBACK_SUMMARY,
        task_analysis=[default_task_analysis(task, today) for task in interview_input.tasks],
        questions=[TaskQuestion(question=FALLBACK_QUESTION, type="priority", required=True)],
        next_steps=list(FALLBACK_NEXT_STEPS),
    )
