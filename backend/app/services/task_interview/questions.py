"""Candidate questions per interview phase.

These are hints folded into the outbound prompt; the service decides which
questions, if any, make it into the final plan.
"""
from __future__ import annotations

from datetime import date, timedelta
from typing import Callable, Dict, List, Optional, Sequence

from app.services.task_interview.models import InterviewPhase, Task, TaskInterviewInput, UserPreferences
from app.services.task_interview.schema import TaskQuestion
from app.services.task_interview.state_analyzer import join_history

URGENT_WINDOW_DAYS = 7
VAGUE_NOTES_CHARS = 10
THIN_NOTES_CHARS = 20
LONG_TITLE_CHARS = 30
LONG_NOTES_CHARS = 50
CONTEXT_TASK_LIMIT = 3
RANKING_TITLE_LIMIT = 3

DEPENDENCY_HINTS = ("review", "after", "update")
FOCUS_WORK_HINTS = ("write", "design", "plan", "review")

FOLLOWUP_TRIGGERS = [
    (
        ("busy", "overwhelmed"),
        TaskQuestion(
            question="Since you mentioned being busy or overwhelmed, should we focus on just the most critical tasks?",
            type="priority",
            options=["Yes - only top 3 priorities", "No - I can handle more", "Depends on the tasks"],
            required=False,
        ),
    ),
    (
        ("tired", "energy"),
        TaskQuestion(
            question="When during the day do you typically have the most energy?",
            type="context",
            options=["Morning person", "Afternoon peak", "Evening surge", "Varies daily"],
            required=False,
        ),
    ),
    (
        ("deadline", "urgent"),
        TaskQuestion(
            question="Are there any other deadlines I should know about that might affect scheduling?",
            type="deadline",
            required=False,
        ),
    ),
    (
        ("focus", "distraction"),
        TaskQuestion(
            question="Do you prefer to batch similar tasks together or mix different types of work?",
            type="context",
            options=["Batch similar tasks", "Mix for variety", "Depends on the day"],
            required=False,
        ),
    ),
]


def generate_priority_questions(tasks: Sequence[Task], today: Optional[date] = None) -> List[TaskQuestion]:
    today = today or date.today()
    questions: List[TaskQuestion] = []
    horizon = today + timedelta(days=URGENT_WINDOW_DAYS)
    overdue = [task for task in tasks if task.due_date and task.due_date < today]
    due_soon = [task for task in tasks if task.due_date and task.due_date <= horizon]
    vague = [task for task in tasks if len(task.notes or "") < VAGUE_NOTES_CHARS]

    if overdue:
        task = overdue[0]
        questions.append(
            TaskQuestion(
                task_id=task.id,
                question=f'"{task.title}" is overdue (due {task.due_date.isoformat()}). How critical is it now?',
                type="priority",
                options=[
                    "Critical - drop everything",
                    "Important - schedule today",
                    "Can wait - reschedule the deadline",
                ],
                required=True,
            )
        )

    if len(due_soon) > 1:
        ranked = due_soon[:RANKING_TITLE_LIMIT]
        titles = ", ".join(f'"{task.title}"' for task in ranked)
        questions.append(
            TaskQuestion(
                question=f"Several tasks are due within a week: {titles}. Which should take priority?",
                type="priority",
                options=[task.title for task in ranked],
                required=True,
            )
        )

    if vague:
        task = vague[0]
        questions.append(
            TaskQuestion(
                task_id=task.id,
                question=f'"{task.title}" needs more context. What does it involve exactly?',
                type="context",
                required=False,
            )
        )
    return questions


def generate_context_questions(tasks: Sequence[Task]) -> List[TaskQuestion]:
    questions: List[TaskQuestion] = []
    for task in list(tasks)[:CONTEXT_TASK_LIMIT]:
        title = task.title.lower()
        if len(task.notes or "") < THIN_NOTES_CHARS:
            questions.append(
                TaskQuestion(
                    task_id=task.id,
                    question=f'How complex is "{task.title}"? This helps estimate the time needed.',
                    type="context",
                    options=[
                        "Quick (15-30 min)",
                        "Moderate (1-2 hours)",
                        "Complex (half day+)",
                        "Unclear - need to investigate",
                    ],
                    required=False,
                )
            )
        if any(hint in title for hint in DEPENDENCY_HINTS):
            questions.append(
                TaskQuestion(
                    task_id=task.id,
                    question=f'Does "{task.title}" depend on anything else being finished first?',
                    type="dependencies",
                    required=False,
                )
            )
    return questions


def generate_scheduling_questions(
    tasks: Sequence[Task],
    preferences: Optional[UserPreferences] = None,
) -> List[TaskQuestion]:
    questions: List[TaskQuestion] = []
    has_focus_work = any(any(hint in task.title.lower() for hint in FOCUS_WORK_HINTS) for task in tasks)
    if has_focus_work and not (preferences and preferences.preferred_time_slots):
        questions.append(
            TaskQuestion(
                question="When do you do your best focused work?",
                type="context",
                options=[
                    "Early morning (6-9 AM)",
                    "Mid-morning (9-12 PM)",
                    "Afternoon (1-4 PM)",
                    "Evening (5-8 PM)",
                ],
                required=False,
            )
        )

    large = next(
        (task for task in tasks if len(task.title) > LONG_TITLE_CHARS or len(task.notes or "") > LONG_NOTES_CHARS),
        None,
    )
    if large is not None:
        questions.append(
            TaskQuestion(
                task_id=large.id,
                question=f'"{large.title}" looks substantial. How long do you expect it to take?',
                type="context",
                options=["1-2 hours", "3-4 hours", "Full day", "Multiple days"],
                required=False,
            )
        )

    if any(task.due for task in tasks):
        questions.append(
            TaskQuestion(
                question="How flexible are you with task scheduling this week?",
                type="context",
                options=[
                    "Very flexible - optimise for efficiency",
                    "Somewhat flexible - respect key deadlines",
                    "Not flexible - strict scheduling needed",
                ],
                required=False,
            )
        )
    return questions


def generate_followup_questions(history: Sequence[str]) -> List[TaskQuestion]:
    blob = join_history(history)
    return [
        question.model_copy(deep=True)
        for triggers, question in FOLLOWUP_TRIGGERS
        if any(trigger in blob for trigger in triggers)
    ]


_GENERATORS: Dict[InterviewPhase, Callable[[TaskInterviewInput, date], List[TaskQuestion]]] = {
    InterviewPhase.INIT: lambda data, today: generate_priority_questions(data.tasks, today),
    InterviewPhase.PRIORITY: lambda data, today: generate_priority_questions(data.tasks, today),
    InterviewPhase.CONTEXT: lambda data, today: generate_context_questions(data.tasks),
    InterviewPhase.SCHEDULING: lambda data, today: generate_scheduling_questions(data.tasks, data.user_preferences),
    InterviewPhase.FOLLOWUP: lambda data, today: generate_followup_questions(data.conversation_history),
}


def candidate_questions_for_phase(
    phase: InterviewPhase,
    interview_input: TaskInterviewInput,
    today: Optional[date] = None,
) -> List[TaskQuestion]:
    """Return advisory questions for ``phase``; READY has none."""
    generator = _GENERATORS.get(phase)
    if generator is None:
        return []
    return generator(interview_input, today or date.today())
