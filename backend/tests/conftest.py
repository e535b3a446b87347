from __future__ import annotations

import copy
from types import SimpleNamespace
from typing import Any, Dict, List

import pytest


class FakeCompletions:
    """Stand-in for ``client.chat.completions``; replays queued contents or raises queued errors."""

    def __init__(self, responses: List[Any]):
        self._responses = list(responses)
        self.calls: List[Dict[str, Any]] = []

    def create(self, **params: Any):
        self.calls.append(params)
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=item))])


class FakeOpenAI:
    def __init__(self, responses: List[Any]):
        self.completions = FakeCompletions(responses)
        self.chat = SimpleNamespace(completions=self.completions)


VALID_PLAN: Dict[str, Any] = {
    "planDate": "2026-10-19",
    "conversationSummary": "We went over this week's tasks and agreed the report comes first.",
    "taskAnalysis": [
        {
            "taskId": "t1",
            "title": "Write report",
            "priority": "high",
            "estimatedDuration": 90,
            "complexity": "moderate",
            "dependencies": [],
            "suggestedSchedule": {
                "preferredDate": "2026-10-20",
                "preferredTimeSlot": "morning",
                "flexibility": "flexible",
            },
            "context": {"filesToOpen": [], "relatedProjects": [], "blockers": []},
        }
    ],
    "questions": [
        {
            "taskId": None,
            "question": "Is there a hard deadline for the report?",
            "type": "deadline",
            "options": None,
            "required": True,
        }
    ],
    "calendarSuggestions": None,
    "nextSteps": ["Block two hours tomorrow morning for the report"],
}


@pytest.fixture()
def fake_openai():
    return FakeOpenAI


@pytest.fixture()
def valid_plan() -> Dict[str, Any]:
    return copy.deepcopy(VALID_PLAN)
