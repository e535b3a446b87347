"""Single-day planning around calendar events."""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field, ValidationError

from app.core.errors import SchemaValidationFailure
from app.observability.metrics import log_metric
from app.observability.tracing import trace
from app.services.task_interview.models import InputModel
from app.services.task_interview.orchestrator import PlanRequestOrchestrator, StructuredRequest
from app.services.task_interview.schema import DATE_PATTERN, ContractModel, strict_json_schema

logger = logging.getLogger(__name__)

BlockType = Literal["meeting", "focus", "break", "admin", "commute", "exercise", "errand", "sleep"]
RiskLevel = Literal["low", "medium", "high"]

FALLBACK_DAY_SUMMARY = "Basic day plan generated using fallback template. Planning service was unavailable."
FALLBACK_DAY_SUGGESTIONS = [
    "Planning service was unavailable, using the basic template",
    "Check the OpenAI API configuration",
    "Try regenerating the plan once the service is restored",
]

DAY_PLAN_SYSTEM_PROMPT = (
    "You are a daily planning assistant. You help users create pragmatic, actionable day plans.\n\n"
    "Requirements:\n"
    "- Return one DayPlan JSON object that follows the provided schema exactly.\n"
    "- Keep calendar events as scheduled; never reschedule meetings with external attendees.\n"
    "- Add focus blocks of the preferred length where time allows, with breaks after long sessions.\n"
    "- Link calendar events to blocks through linkedEvents.\n"
    "- Leave buffer time and include commute time between locations.\n\n"
    "Read-only mode:\n"
    "- filesToOpen may only list files to read.\n"
    "- Never include shell commands in the commands field.\n\n"
    "Ambiguities:\n"
    "- At most 3 specific questions; required=true only when missing information blocks planning.\n"
    "- Offer options when possible.\n\n"
    "Suggestions are short, practical and specific to the day."
)


class PlanBlock(ContractModel):
    start: str = Field(..., min_length=1, description="ISO 8601 datetime.")
    end: str = Field(..., min_length=1, description="ISO 8601 datetime.")
    label: str = Field(..., min_length=1)
    type: BlockType
    depends_on: Optional[List[str]] = None
    linked_events: Optional[List[str]] = None
    files_to_open: Optional[List[str]] = None
    commands: Optional[List[str]] = None
    risk: Optional[RiskLevel] = None


class Ambiguity(ContractModel):
    event_id: Optional[str] = None
    question: str = Field(..., min_length=1)
    options: Optional[List[str]] = None
    required: bool


class DayPlan(ContractModel):
    date: str = Field(..., pattern=DATE_PATTERN)
    summary: str = Field(..., min_length=10, max_length=500)
    blocks: List[PlanBlock] = Field(..., min_length=1)
    ambiguities: Optional[List[Ambiguity]] = None
    suggestions: Optional[List[str]] = None


class DayPreferences(InputModel):
    focus_block_mins: int = Field(default=90, ge=5, le=480)
    style: Literal["concise", "chatty", "bullet"] = "concise"


class PlanningContext(InputModel):
    date: str = Field(..., pattern=DATE_PATTERN)
    events: List[Any] = Field(default_factory=list)
    preferences: DayPreferences = Field(default_factory=DayPreferences)
    context: Optional[Dict[str, Any]] = None


def parse_day_plan(payload: Any) -> DayPlan:
    try:
        plan = DayPlan.model_validate(payload, by_alias=True, by_name=False)
    except ValidationError as exc:
        raise SchemaValidationFailure(f"DayPlan rejected: {exc.error_count()} error(s)") from exc
    # Read-only planning: shell snippets are never passed through.
    if any(block.commands for block in plan.blocks):
        logger.info("Stripping commands from day plan blocks")
        plan = plan.model_copy(
            update={"blocks": [block.model_copy(update={"commands": None}) for block in plan.blocks]}
        )
    return plan


def build_fallback_day_plan(context: PlanningContext) -> DayPlan:
    day = context.date
    return DayPlan(
        date=day,
        summary=FALLBACK_DAY_SUMMARY,
        blocks=[
            PlanBlock(start=f"{day}T09:00:00", end=f"{day}T12:00:00", label="Morning work block", type="focus", risk="low"),
            PlanBlock(start=f"{day}T12:00:00", end=f"{day}T13:00:00", label="Lunch break", type="break", risk="low"),
            PlanBlock(start=f"{day}T13:00:00", end=f"{day}T17:00:00", label="Afternoon work block", type="focus", risk="low"),
        ],
        ambiguities=[],
        suggestions=list(FALLBACK_DAY_SUGGESTIONS),
    )


def generate_day_plan(
    context: PlanningContext,
    orchestrator: Optional[PlanRequestOrchestrator] = None,
) -> DayPlan:
    """Ask the planning service for a day plan; fall back to the fixed template on any failure."""
    metadata = {"date": context.date, "event_count": len(context.events)}
    with trace("day_plan.generate", metadata=metadata):
        if orchestrator is None:
            log_metric("day_plan.fallback.used", 1, {"reason": "service_unavailable"})
            return build_fallback_day_plan(context)

        outcome = orchestrator.request(
            StructuredRequest(
                name="day_plan",
                description="A structured day plan with time blocks and suggestions",
                schema=strict_json_schema(DayPlan),
                system_prompt=DAY_PLAN_SYSTEM_PROMPT,
                user_prompt=build_day_plan_prompt(context),
                parse=parse_day_plan,
                trace_metadata=metadata,
            )
        )
        if outcome.result is None:
            log_metric("day_plan.fallback.used", 1, {"reason": outcome.failure or "unknown"})
            return build_fallback_day_plan(context)
        return outcome.result


def build_day_plan_prompt(context: PlanningContext) -> str:
    parts = [
        f"Create a day plan for {context.date}.\n\n"
        "User Preferences:\n"
        f"- Focus block duration: {context.preferences.focus_block_mins} minutes\n"
        f"- Communication style: {context.preferences.style}"
    ]
    if context.events:
        parts.append(f"Calendar Events ({len(context.events)} total):\n{json.dumps(context.events, indent=2, default=str)}")
    else:
        parts.append("Calendar Events: None scheduled")
    if context.context:
        parts.append(f"Additional Context:\n{json.dumps(context.context, indent=2, default=str)}")
    parts.append(
        "Create a day plan that keeps every calendar event as scheduled, adds focus blocks where time is "
        "available, includes breaks and buffer time, lists open ambiguities and offers suggestions for the day."
    )
    return "\n\n".join(parts)
