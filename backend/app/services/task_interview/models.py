"""Input records and transient analysis types for the task interview."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Literal, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.services.task_interview.schema import DATE_PATTERN, TIME_PATTERN, TimeSlot


class InputModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TaskListRef(InputModel):
    id: str
    title: str


class Task(InputModel):
    """Work item as delivered by the task source. Never mutated by the planner."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True, extra="ignore")

    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    notes: Optional[str] = None
    status: Literal["needsAction", "completed"] = "needsAction"
    due: Optional[str] = Field(default=None, description="ISO date or RFC 3339 datetime.")
    completed: Optional[str] = None
    parent: Optional[str] = None
    position: Optional[str] = None
    task_list: Optional[TaskListRef] = None
    provider: Optional[str] = None

    @property
    def due_date(self) -> Optional[date]:
        return parse_due_date(self.due)


class UserPreferences(InputModel):
    preferred_time_slots: Optional[List[TimeSlot]] = None
    focus_block_minimum: int = Field(default=90, ge=5, le=480)
    conversation_style: Literal["concise", "detailed", "collaborative"] = "concise"
    prioritization_approach: Literal["deadline", "impact", "energy", "hybrid"] = "hybrid"


class WorkingHours(InputModel):
    start: str = Field(..., pattern=TIME_PATTERN)
    end: str = Field(..., pattern=TIME_PATTERN)


class InterviewContext(InputModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    current_date: Optional[str] = Field(default=None, pattern=DATE_PATTERN)
    time_zone: Optional[str] = None
    working_hours: Optional[WorkingHours] = None


class TaskInterviewInput(InputModel):
    tasks: List[Task] = Field(default_factory=list)
    conversation_history: List[str] = Field(default_factory=list, description="Chronological turns.")
    user_preferences: Optional[UserPreferences] = None
    context: Optional[InterviewContext] = None

    def prompt_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class InterviewPhase(str, Enum):
    INIT = "INIT"
    PRIORITY = "PRIORITY"
    CONTEXT = "CONTEXT"
    SCHEDULING = "SCHEDULING"
    FOLLOWUP = "FOLLOWUP"
    READY = "READY"

    @property
    def rank(self) -> int:
        return PHASE_ORDER.index(self)


PHASE_ORDER = [
    InterviewPhase.INIT,
    InterviewPhase.PRIORITY,
    InterviewPhase.CONTEXT,
    InterviewPhase.SCHEDULING,
    InterviewPhase.FOLLOWUP,
    InterviewPhase.READY,
]


@dataclass
class InterviewState:
    phase: InterviewPhase
    topics_covered: List[str] = field(default_factory=list)
    questions_needed: int = 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "phase": self.phase.value,
            "topics_covered": list(self.topics_covered),
            "questions_needed": self.questions_needed,
        }


@dataclass
class ConversationInsights:
    risk_factors: List[str] = field(default_factory=list)
    optimization_suggestions: List[str] = field(default_factory=list)
    readiness_score: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "risk_factors": list(self.risk_factors),
            "optimization_suggestions": list(self.optimization_suggestions),
            "readiness_score": self.readiness_score,
        }


def parse_due_date(value: Optional[str]) -> Optional[date]:
    """Read the calendar date out of a task due value; None when absent or garbled."""
    if not value:
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def resolve_today(context: Optional[InterviewContext], default_time_zone: str = "UTC") -> date:
    """Today as the interview sees it: explicit context date, else now in the user's zone."""
    if context and context.current_date:
        parsed = parse_due_date(context.current_date)
        if parsed:
            return parsed
    zone_name = (context.time_zone if context else None) or default_time_zone
    try:
        return datetime.now(ZoneInfo(zone_name)).date()
    except (ZoneInfoNotFoundError, ValueError):
        return date.today()
