"""Prompt assembly for the task interview request."""
from __future__ import annotations

import json
from datetime import date
from typing import List

from app.services.task_interview.models import InterviewPhase, InterviewState, TaskInterviewInput
from app.services.task_interview.schema import TaskQuestion, task_plan_json_schema

PHASE_FOCUS = {
    InterviewPhase.INIT: "Getting started with prioritisation. Ask which tasks are most urgent or important.",
    InterviewPhase.PRIORITY: "Understanding priorities, deadlines and urgency. Identify what needs immediate attention.",
    InterviewPhase.CONTEXT: "Gathering context about complexity, time estimates and dependencies for each task.",
    InterviewPhase.SCHEDULING: "Scheduling preferences, time-of-day fit and duration estimates.",
    InterviewPhase.FOLLOWUP: "Clarifying remaining questions from the conversation and resolving gaps or conflicts.",
    InterviewPhase.READY: "Enough information is available. Produce the complete plan with concrete calendar suggestions.",
}


def build_system_prompt(interview_input: TaskInterviewInput, today: date, time_zone: str) -> str:
    """Fixed instruction block: the output contract plus behavioural rules."""
    schema_json = json.dumps(task_plan_json_schema(), indent=2)
    context_json = json.dumps(
        interview_input.context.model_dump(mode="json", by_alias=True, exclude_none=True)
        if interview_input.context
        else {},
        indent=2,
    )
    return (
        "You are a task planning assistant that runs short, interview-first conversations. "
        "Each turn you return exactly one TaskPlan JSON object that conforms to the schema below.\n\n"
        "### SCOPE\n"
        "- Benign planning only. Decline harmful requests in one line and offer a safe planning alternative.\n"
        "- Never suggest shell commands or file modifications; files listed in filesToOpen are read-only.\n\n"
        "### INTERVIEW RULES\n"
        "- Ask 1-3 high-leverage questions per turn, preferring multiple choice or short answers.\n"
        "- Offer opinionated defaults when sensible and mark the assumption.\n"
        "- If the user says 'use your judgement', choose defaults and move on.\n"
        "- Stop interviewing once every field the schema requires is known or safely assumed.\n\n"
        "### PLAN RULES\n"
        "- Produce one taskAnalysis entry per input task, reusing the task's id as taskId.\n"
        "- Dependencies reference other task ids, never free text.\n"
        "- estimatedDuration is in minutes between 5 and 480; calendar durations between 15 and 480.\n"
        f"- Dates are ISO-8601 (YYYY-MM-DD); interpret relative dates in {time_zone}.\n"
        f"- planDate is {today.isoformat()}.\n"
        "- conversationSummary is 2-3 sentences about what was discussed (10-500 characters).\n"
        "- nextSteps lists what the assistant should do next; at least one entry.\n\n"
        "### OUTPUT CONTRACT (authoritative)\n"
        f"{schema_json}\n\n"
        "### HOST CONTEXT\n"
        f"Today: {today.isoformat()} ({time_zone})\n"
        f"{context_json}\n\n"
        "Return the JSON object only: no markdown, no comments, no extra keys."
    )


def build_interview_prompt(
    interview_input: TaskInterviewInput,
    state: InterviewState,
    candidates: List[TaskQuestion],
) -> str:
    """Per-call prompt carrying tasks, phase, candidate questions, preferences and context."""
    tasks_json = json.dumps(
        [task.model_dump(mode="json", by_alias=True, exclude_none=True) for task in interview_input.tasks],
        indent=2,
    )
    topics = ", ".join(state.topics_covered) or "None yet"
    sections = [
        f"I need help planning my tasks. I have {len(interview_input.tasks)} task(s) to prioritise and schedule.\n\n"
        f"**Current Interview Phase**: {state.phase.value}\n"
        f"**Topics Covered**: {topics}\n"
        f"**Questions Still Needed**: {state.questions_needed}\n\n"
        f"Tasks to analyse:\n{tasks_json}"
    ]

    if interview_input.user_preferences:
        preferences = interview_input.user_preferences.model_dump(mode="json", by_alias=True, exclude_none=True)
        sections.append(f"My preferences:\n{json.dumps(preferences, indent=2)}")

    if interview_input.conversation_history:
        sections.append("Previous conversation:\n" + "\n".join(interview_input.conversation_history))

    if candidates:
        lines = [_candidate_line(question) for question in candidates]
        sections.append("**Questions to consider** (from local task analysis):\n" + "\n".join(lines))

    if interview_input.context:
        context = interview_input.context.model_dump(mode="json", by_alias=True, exclude_none=True)
        if context:
            sections.append(f"Additional context:\n{json.dumps(context, indent=2)}")

    sections.append(f"**Focus on**: {PHASE_FOCUS[state.phase]}")
    return "\n\n".join(sections)


def _candidate_line(question: TaskQuestion) -> str:
    line = f"- {question.question}"
    if question.options:
        line = f"{line} Options: {', '.join(question.options)}"
    return line
