from __future__ import annotations

import pytest

from app.core.errors import SchemaValidationFailure
from app.services.task_interview.schema import (
    TaskPlan,
    parse_task_plan,
    task_plan_json_schema,
    validate_task_plan,
)


def test_valid_plan_parses_from_camel_case(valid_plan) -> None:
    plan = parse_task_plan(valid_plan)

    assert isinstance(plan, TaskPlan)
    assert plan.task_analysis[0].estimated_duration == 90
    assert plan.task_analysis[0].suggested_schedule.preferred_time_slot == "morning"
    assert plan.questions[0].task_id is None
    assert plan.calendar_suggestions is None


def test_to_wire_uses_camel_case_and_drops_nulls(valid_plan) -> None:
    wire = parse_task_plan(valid_plan).to_wire()

    assert "planDate" in wire
    assert "calendarSuggestions" not in wire
    assert wire["taskAnalysis"][0]["suggestedSchedule"]["preferredDate"] == "2026-10-20"
    assert "taskId" not in wire["questions"][0]


def _rename_keys(node, names):
    for alias, name in names.items():
        node[name] = node.pop(alias)


@pytest.mark.parametrize(
    "mutate",
    [
        lambda plan: plan.update({"extra": "nope"}),
        lambda plan: plan.update({"planDate": "19/10/2026"}),
        lambda plan: plan.update({"conversationSummary": "short"}),
        lambda plan: plan.update({"nextSteps": []}),
        lambda plan: plan.update({"nextSteps": ["   "]}),
        lambda plan: plan["taskAnalysis"][0].update({"estimatedDuration": 3}),
        lambda plan: plan["taskAnalysis"][0].update({"priority": "critical"}),
        lambda plan: plan["taskAnalysis"][0]["suggestedSchedule"].update({"preferredTimeSlot": "night"}),
        lambda plan: plan["questions"][0].update({"question": "Why?"}),
        lambda plan: plan.pop("taskAnalysis"),
        lambda plan: _rename_keys(
            plan,
            {
                "planDate": "plan_date",
                "conversationSummary": "conversation_summary",
                "taskAnalysis": "task_analysis",
                "nextSteps": "next_steps",
            },
        ),
        lambda plan: _rename_keys(
            plan["taskAnalysis"][0],
            {"taskId": "task_id", "estimatedDuration": "estimated_duration", "suggestedSchedule": "suggested_schedule"},
        ),
    ],
)
def test_invalid_plans_are_rejected(valid_plan, mutate) -> None:
    mutate(valid_plan)

    with pytest.raises(SchemaValidationFailure):
        parse_task_plan(valid_plan)
    assert validate_task_plan(valid_plan) is False


def test_validate_task_plan_accepts_valid_payload(valid_plan) -> None:
    assert validate_task_plan(valid_plan) is True
    assert validate_task_plan("not a plan") is False


def test_calendar_suggestion_duration_bounds(valid_plan) -> None:
    suggestion = {
        "taskId": "t1",
        "eventTitle": "Report writing",
        "suggestedDate": "2026-10-20",
        "suggestedTime": "09:00",
        "duration": 10,
        "description": "Focus block",
    }
    valid_plan["calendarSuggestions"] = [suggestion]
    assert validate_task_plan(valid_plan) is False

    suggestion["duration"] = 90
    assert validate_task_plan(valid_plan) is True


def test_wire_schema_is_strict() -> None:
    schema = task_plan_json_schema()

    assert schema["additionalProperties"] is False
    assert set(schema["required"]) == set(schema["properties"])
    assert "calendarSuggestions" in schema["required"]

    analysis = schema["$defs"]["TaskAnalysis"]
    assert analysis["additionalProperties"] is False
    assert "title" in analysis["properties"]
    assert set(analysis["required"]) == set(analysis["properties"])
    assert "default" not in analysis["properties"]["dependencies"]


def test_wire_schema_is_a_fresh_copy() -> None:
    schema = task_plan_json_schema()
    schema["properties"].clear()

    assert task_plan_json_schema()["properties"]
