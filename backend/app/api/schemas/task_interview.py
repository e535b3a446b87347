"""Schemas for the task interview endpoints."""
from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from app.services.task_interview.models import TaskInterviewInput
from app.services.task_interview.schema import TaskQuestion
from app.services.task_interview.session_store.base import InterviewSessionRecord


class TaskInterviewRequest(TaskInterviewInput):
    session_key: Optional[str] = Field(default=None, description="Overrides the X-Interview-Session header.")


class InterviewStatePayload(BaseModel):
    phase: str
    topics_covered: List[str]
    questions_needed: int


class ConversationInsightsPayload(BaseModel):
    risk_factors: List[str]
    optimization_suggestions: List[str]
    readiness_score: int


class SessionRecordResponse(BaseModel):
    session_key: str
    last_update: str
    interview_phase: str
    completed_topics: List[str]
    task_count: int
    conversation_length: int
    readiness_score: int
    fallback_used: bool
    last_response: Optional[Dict[str, int]] = None

    @classmethod
    def from_record(cls, record: InterviewSessionRecord) -> "SessionRecordResponse":
        return cls(**record.to_dict())


class InterviewPreviewResponse(BaseModel):
    state: InterviewStatePayload
    candidate_questions: List[TaskQuestion]
    insights: ConversationInsightsPayload
    next_steps: List[str]
    previous: Optional[SessionRecordResponse] = None
    request_id: str
