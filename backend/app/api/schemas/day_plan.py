"""Schemas for day plan generation."""
from __future__ import annotations

from app.services.day_planner import DayPlan, PlanningContext

DayPlanRequest = PlanningContext
DayPlanResponse = DayPlan

__all__ = ["DayPlanRequest", "DayPlanResponse"]
