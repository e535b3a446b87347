"""TaskPlan output contract.

The pydantic models below are the only definition of a valid plan. The strict
JSON schema sent to the reasoning service and the inbound validation both come
from them.
"""
from __future__ import annotations

import copy
from functools import lru_cache
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from app.core.errors import SchemaValidationFailure

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"
TIME_PATTERN = r"^\d{2}:\d{2}$"

Priority = Literal["urgent", "high", "medium", "low"]
Complexity = Literal["simple", "moderate", "complex"]
TimeSlot = Literal["morning", "afternoon", "evening"]
Flexibility = Literal["fixed", "flexible", "whenever"]
QuestionType = Literal["priority", "deadline", "dependencies", "context"]

PRIORITIES = ("urgent", "high", "medium", "low")
COMPLEXITIES = ("simple", "moderate", "complex")

# Keywords with no meaning to the service; dropped from the outbound schema.
_WIRE_SCHEMA_NOISE = ("title", "default")


class ContractModel(BaseModel):
    """Base for wire-contract models: camelCase on the wire, no extra keys."""

    model_config = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class SuggestedSchedule(ContractModel):
    preferred_date: str = Field(..., pattern=DATE_PATTERN)
    preferred_time_slot: TimeSlot
    flexibility: Flexibility


class TaskContextBundle(ContractModel):
    files_to_open: List[str] = Field(default_factory=list)
    related_projects: List[str] = Field(default_factory=list)
    blockers: List[str] = Field(default_factory=list)


class TaskAnalysis(ContractModel):
    """Per-task verdict."""

    task_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    priority: Priority
    estimated_duration: int = Field(..., ge=5, le=480, description="Minutes.")
    complexity: Complexity
    dependencies: List[str] = Field(default_factory=list, description="Ids of tasks this one waits on.")
    suggested_schedule: SuggestedSchedule
    context: TaskContextBundle


class TaskQuestion(ContractModel):
    task_id: Optional[str] = None
    question: str = Field(..., min_length=10)
    type: QuestionType
    options: Optional[List[str]] = None
    required: bool


class CalendarSuggestion(ContractModel):
    task_id: str = Field(..., min_length=1)
    event_title: str = Field(..., min_length=1)
    suggested_date: str = Field(..., pattern=DATE_PATTERN)
    suggested_time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    duration: int = Field(..., ge=15, le=480, description="Minutes.")
    description: str = Field(..., min_length=1)


class TaskPlan(ContractModel):
    """The engine's single structured output."""

    plan_date: str = Field(..., pattern=DATE_PATTERN)
    conversation_summary: str = Field(..., min_length=10, max_length=500)
    task_analysis: List[TaskAnalysis]
    questions: Optional[List[TaskQuestion]] = None
    calendar_suggestions: Optional[List[CalendarSuggestion]] = None
    next_steps: List[str] = Field(..., min_length=1)


def parse_task_plan(payload: Any) -> TaskPlan:
    """Validate ``payload`` against the contract or raise SchemaValidationFailure."""
    if isinstance(payload, TaskPlan):
        payload = payload.to_wire()
    try:
        plan = TaskPlan.model_validate(payload, by_alias=True, by_name=False)
    except ValidationError as exc:
        raise SchemaValidationFailure(f"TaskPlan rejected: {exc.error_count()} error(s); first: {_first_error(exc)}") from exc
    if any(not step.strip() for step in plan.next_steps):
        raise SchemaValidationFailure("TaskPlan rejected: blank next step")
    return plan


def validate_task_plan(payload: Any) -> bool:
    """Return True when ``payload`` is a structurally valid TaskPlan."""
    try:
        parse_task_plan(payload)
    except SchemaValidationFailure:
        return False
    return True


@lru_cache
def _task_plan_wire_schema() -> Dict[str, Any]:
    return strict_json_schema(TaskPlan)


def task_plan_json_schema() -> Dict[str, Any]:
    """Strict JSON schema used as the hard output constraint on the service."""
    return copy.deepcopy(_task_plan_wire_schema())


def strict_json_schema(model: type[BaseModel]) -> Dict[str, Any]:
    """Project a contract model onto the strict structured-output dialect.

    Every object lists all of its properties as required (optional ones are
    already nullable) and forbids additional properties.
    """
    schema = model.model_json_schema(by_alias=True)
    _tighten(schema)
    return schema


def _tighten(node: Any) -> None:
    if isinstance(node, dict):
        for key in _WIRE_SCHEMA_NOISE:
            if key in node and not isinstance(node[key], dict):
                node.pop(key)
        properties = node.get("properties")
        if isinstance(properties, dict):
            node["required"] = list(properties)
            node["additionalProperties"] = False
            for child in properties.values():
                _tighten(child)
        for key, value in node.items():
            if key != "properties":
                _tighten(value)
    elif isinstance(node, list):
        for item in node:
            _tighten(item)


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "unknown"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location or '<root>'}: {first.get('msg', 'invalid')}"
