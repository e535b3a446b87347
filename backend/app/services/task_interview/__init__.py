"""Interview-first task planning."""
from app.services.task_interview.engine import (
    TaskInterviewEngine,
    conduct_task_interview,
    get_task_interview_engine,
)
from app.services.task_interview.models import TaskInterviewInput
from app.services.task_interview.schema import TaskPlan, parse_task_plan, validate_task_plan

__all__ = [
    "TaskInterviewEngine",
    "TaskInterviewInput",
    "TaskPlan",
    "conduct_task_interview",
    "get_task_interview_engine",
    "parse_task_plan",
    "validate_task_plan",
]
