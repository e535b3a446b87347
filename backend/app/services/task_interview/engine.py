"""Task interview engine: one call in, exactly one valid TaskPlan out."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from functools import lru_cache
from typing import Callable, List, Optional

from app.core.config import settings
from app.observability.metrics import log_metric
from app.observability.tracing import trace
from app.services.task_interview.fallback import build_fallback_task_plan, default_task_analysis
from app.services.task_interview.insights import generate_next_steps, get_conversation_insights
from app.services.task_interview.models import (
    ConversationInsights,
    InterviewPhase,
    InterviewState,
    TaskInterviewInput,
    resolve_today,
)
from app.services.task_interview.orchestrator import PlanRequestOrchestrator, StructuredRequest
from app.services.task_interview.prompts import build_interview_prompt, build_system_prompt
from app.services.task_interview.questions import candidate_questions_for_phase
from app.services.task_interview.schema import (
    TaskAnalysis,
    TaskPlan,
    TaskQuestion,
    parse_task_plan,
    task_plan_json_schema,
)
from app.services.task_interview.session_store.base import InterviewSessionRecord, SessionStateStore
from app.services.task_interview.session_store.factory import get_session_state_store
from app.services.task_interview.state_analyzer import (
    InterviewStateClassifier,
    KeywordInterviewClassifier,
    analyze_interview_state,
)

logger = logging.getLogger(__name__)

FOLLOWUP_TEMPERATURE_STEP = 0.1
FOLLOWUP_TEMPERATURE_CAP = 0.3
READY_THRESHOLD = 70


@dataclass
class InterviewPreview:
    """Local analysis of an interview turn, computed without calling the service."""

    state: InterviewState
    candidate_questions: List[TaskQuestion]
    insights: ConversationInsights
    next_steps: List[str]
    previous: Optional[InterviewSessionRecord] = None


class TaskInterviewEngine:
    def __init__(
        self,
        orchestrator: Optional[PlanRequestOrchestrator] = None,
        session_store: Optional[SessionStateStore] = None,
        classifier: Optional[InterviewStateClassifier] = None,
        today: Optional[Callable[[TaskInterviewInput], date]] = None,
        base_temperature: Optional[float] = None,
    ) -> None:
        self.orchestrator = orchestrator
        self.session_store = session_store
        self.classifier = classifier or KeywordInterviewClassifier()
        self._today = today or (lambda data: resolve_today(data.context, settings.default_time_zone))
        self.base_temperature = settings.planner_temperature if base_temperature is None else base_temperature

    def preview(self, interview_input: TaskInterviewInput, session_key: Optional[str] = None) -> InterviewPreview:
        today = self._today(interview_input)
        state = self.classifier.classify(interview_input.conversation_history, len(interview_input.tasks))
        previous = self._load_previous(session_key)
        insights = get_conversation_insights(interview_input, state, previous)
        return InterviewPreview(
            state=state,
            candidate_questions=candidate_questions_for_phase(state.phase, interview_input, today),
            insights=insights,
            next_steps=generate_next_steps(state.phase, insights),
            previous=previous,
        )

    def conduct_interview(
        self,
        interview_input: TaskInterviewInput,
        session_key: Optional[str] = None,
        request_id: Optional[str] = None,
    ) -> TaskPlan:
        """Run one interview turn. Never raises; degraded runs return the fallback plan."""
        today = self._safe_today(interview_input)
        try:
            with trace(
                "task_interview.conduct",
                metadata={"task_count": len(interview_input.tasks), "turns": len(interview_input.conversation_history)},
                session_key=session_key,
                request_id=request_id,
            ):
                return self._conduct(interview_input, session_key, today)
        except Exception:
            logger.exception("Task interview failed unexpectedly; returning fallback plan")
            log_metric("task_interview.fallback.used", 1, {"reason": "unexpected_error"})
            plan = build_fallback_task_plan(interview_input, today)
            self._remember_after_error(session_key, interview_input, plan)
            return plan

    def _conduct(self, interview_input: TaskInterviewInput, session_key: Optional[str], today: date) -> TaskPlan:
        preview = self.preview(interview_input, session_key)
        state, insights = preview.state, preview.insights
        logger.info(
            "Interview phase=%s readiness=%s risks=%s hints=%s",
            state.phase.value,
            insights.readiness_score,
            insights.risk_factors,
            insights.optimization_suggestions,
        )
        log_metric("task_interview.readiness_score", insights.readiness_score, {"phase": state.phase.value})
        if state.phase is InterviewPhase.READY and insights.readiness_score >= READY_THRESHOLD:
            logger.info("Readiness threshold met; requesting final plan")

        plan: Optional[TaskPlan] = None
        failure = "service_unavailable"
        if self.orchestrator is not None:
            outcome = self.orchestrator.request(
                StructuredRequest(
                    name="task_plan",
                    description="A structured task plan with interview questions and analysis",
                    schema=task_plan_json_schema(),
                    system_prompt=build_system_prompt(interview_input, today, self._time_zone(interview_input)),
                    user_prompt=build_interview_prompt(interview_input, state, preview.candidate_questions),
                    parse=parse_task_plan,
                    temperature=self._temperature_for(state.phase),
                    trace_metadata={"phase": state.phase.value},
                )
            )
            plan = outcome.result
            failure = outcome.failure or failure

        if plan is None:
            log_metric("task_interview.fallback.used", 1, {"reason": failure, "phase": state.phase.value})
            plan = build_fallback_task_plan(interview_input, today)
            self._remember(session_key, interview_input, state, insights, plan, fallback_used=True)
            return plan

        plan = plan.model_copy(
            update={
                "task_analysis": reconcile_task_analysis(plan.task_analysis, interview_input, today),
                "next_steps": generate_next_steps(state.phase, insights),
            }
        )
        self._remember(session_key, interview_input, state, insights, plan, fallback_used=False)
        return plan

    def _temperature_for(self, phase: InterviewPhase) -> float:
        if phase is InterviewPhase.FOLLOWUP:
            return min(FOLLOWUP_TEMPERATURE_CAP, self.base_temperature + FOLLOWUP_TEMPERATURE_STEP)
        return self.base_temperature

    def _load_previous(self, session_key: Optional[str]) -> Optional[InterviewSessionRecord]:
        if not session_key or self.session_store is None:
            return None
        try:
            return self.session_store.get(session_key)
        except Exception:
            logger.warning("Session store read failed for %s; continuing without history", session_key, exc_info=True)
            return None

    def _remember(
        self,
        session_key: Optional[str],
        interview_input: TaskInterviewInput,
        state: InterviewState,
        insights: ConversationInsights,
        plan: TaskPlan,
        *,
        fallback_used: bool,
    ) -> None:
        if not session_key or self.session_store is None:
            return
        record = InterviewSessionRecord(
            session_key=session_key,
            last_update=datetime.now(timezone.utc).isoformat(),
            interview_phase=state.phase.value,
            completed_topics=list(state.topics_covered),
            task_count=len(interview_input.tasks),
            conversation_length=len(interview_input.conversation_history),
            readiness_score=insights.readiness_score,
            fallback_used=fallback_used,
            last_response={
                "questions_generated": len(plan.questions or []),
                "calendar_suggestions": len(plan.calendar_suggestions or []),
                "next_steps": len(plan.next_steps),
            },
        )
        try:
            self.session_store.put(session_key, record)
        except Exception:
            logger.warning("Session store write failed for %s", session_key, exc_info=True)

    def _remember_after_error(
        self,
        session_key: Optional[str],
        interview_input: TaskInterviewInput,
        plan: TaskPlan,
    ) -> None:
        """Record a fallback turn after an unexpected error, classifying with keywords if the classifier failed."""
        if not session_key or self.session_store is None:
            return
        history = interview_input.conversation_history
        try:
            state = self.classifier.classify(history, len(interview_input.tasks))
        except Exception:
            state = analyze_interview_state(history, len(interview_input.tasks))
        try:
            insights = get_conversation_insights(interview_input, state)
        except Exception:
            logger.warning("Could not analyse failed turn for %s; session not updated", session_key, exc_info=True)
            return
        self._remember(session_key, interview_input, state, insights, plan, fallback_used=True)

    def _safe_today(self, interview_input: TaskInterviewInput) -> date:
        try:
            return self._today(interview_input)
        except Exception:
            logger.warning("Could not resolve the interview date; using the local date", exc_info=True)
            return date.today()

    @staticmethod
    def _time_zone(interview_input: TaskInterviewInput) -> str:
        if interview_input.context and interview_input.context.time_zone:
            return interview_input.context.time_zone
        return settings.default_time_zone


def reconcile_task_analysis(
    analyses: List[TaskAnalysis],
    interview_input: TaskInterviewInput,
    today: date,
) -> List[TaskAnalysis]:
    """Keep one analysis per input task, padding missing tasks with neutral defaults."""
    known = {task.id: task for task in interview_input.tasks}
    seen: set[str] = set()
    reconciled: List[TaskAnalysis] = []
    for analysis in analyses:
        if analysis.task_id not in known or analysis.task_id in seen:
            logger.debug("Dropping analysis for unknown or repeated task %s", analysis.task_id)
            continue
        seen.add(analysis.task_id)
        reconciled.append(analysis)
    for task in interview_input.tasks:
        if task.id not in seen:
            seen.add(task.id)
            reconciled.append(default_task_analysis(task, today))
    return reconciled


@lru_cache
def get_task_interview_engine() -> TaskInterviewEngine:
    """Return the process-wide engine built from settings."""
    return TaskInterviewEngine(
        orchestrator=PlanRequestOrchestrator.from_settings(),
        session_store=get_session_state_store(),
    )


def conduct_task_interview(
    interview_input: TaskInterviewInput,
    session_key: Optional[str] = None,
    *,
    request_id: Optional[str] = None,
) -> TaskPlan:
    return get_task_interview_engine().conduct_interview(interview_input, session_key, request_id=request_id)
