"""Day plan API routes."""
from __future__ import annotations

from functools import lru_cache
from typing import Optional

from fastapi import APIRouter, Depends

from app.api.schemas.day_plan import DayPlanRequest, DayPlanResponse
from app.services.day_planner import generate_day_plan
from app.services.task_interview.orchestrator import PlanRequestOrchestrator

router = APIRouter()


@lru_cache
def get_plan_orchestrator() -> Optional[PlanRequestOrchestrator]:
    return PlanRequestOrchestrator.from_settings()


@router.post(
    "/day-plan",
    response_model=DayPlanResponse,
    response_model_by_alias=True,
    response_model_exclude_none=True,
    tags=["day-plan"],
)
def create_day_plan(
    payload: DayPlanRequest,
    orchestrator: Optional[PlanRequestOrchestrator] = Depends(get_plan_orchestrator),
) -> DayPlanResponse:
    return generate_day_plan(payload, orchestrator=orchestrator)
