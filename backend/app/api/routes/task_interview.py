"""Task interview API routes."""
from __future__ import annotations

from time import perf_counter
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status

from app.api.schemas.task_interview import (
    ConversationInsightsPayload,
    InterviewPreviewResponse,
    InterviewStatePayload,
    SessionRecordResponse,
    TaskInterviewRequest,
)
from app.core.middleware import SESSION_HEADER
from app.observability.metrics import log_metric
from app.services.task_interview.engine import TaskInterviewEngine, get_task_interview_engine
from app.services.task_interview.models import TaskInterviewInput
from app.services.task_interview.schema import TaskPlan

router = APIRouter()


def _split(payload: TaskInterviewRequest, request: Request) -> tuple[TaskInterviewInput, Optional[str]]:
    interview_input = TaskInterviewInput.model_validate(payload.model_dump(exclude={"session_key"}))
    return interview_input, payload.session_key or request.headers.get(SESSION_HEADER)


@router.post(
    "/task-interview",
    response_model=TaskPlan,
    response_model_by_alias=True,
    response_model_exclude_none=True,
    tags=["task-interview"],
)
def run_task_interview(
    payload: TaskInterviewRequest,
    request: Request,
    engine: TaskInterviewEngine = Depends(get_task_interview_engine),
) -> TaskPlan:
    """Run one interview turn and return the resulting TaskPlan."""
    request_id = getattr(request.state, "request_id", None)
    interview_input, session_key = _split(payload, request)
    start = perf_counter()
    plan = engine.conduct_interview(interview_input, session_key, request_id=request_id)
    log_metric("task_interview.latency_ms", (perf_counter() - start) * 1000, {"task_count": len(interview_input.tasks)})
    return plan


@router.post("/task-interview/preview", response_model=InterviewPreviewResponse, tags=["task-interview"])
def preview_task_interview(
    payload: TaskInterviewRequest,
    request: Request,
    engine: TaskInterviewEngine = Depends(get_task_interview_engine),
) -> InterviewPreviewResponse:
    """Local interview analysis without calling the planning service."""
    interview_input, session_key = _split(payload, request)
    preview = engine.preview(interview_input, session_key)
    return InterviewPreviewResponse(
        state=InterviewStatePayload(**preview.state.to_dict()),
        candidate_questions=preview.candidate_questions,
        insights=ConversationInsightsPayload(**preview.insights.to_dict()),
        next_steps=preview.next_steps,
        previous=SessionRecordResponse.from_record(preview.previous) if preview.previous else None,
        request_id=getattr(request.state, "request_id", None) or "",
    )


@router.get(
    "/task-interview/sessions/{session_key}",
    response_model=SessionRecordResponse,
    tags=["task-interview"],
)
def get_interview_session(
    session_key: str,
    engine: TaskInterviewEngine = Depends(get_task_interview_engine),
) -> SessionRecordResponse:
    record = engine.session_store.get(session_key) if engine.session_store else None
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")
    return SessionRecordResponse.from_record(record)
