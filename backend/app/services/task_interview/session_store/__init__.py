"""Session state store implementations."""
from app.services.task_interview.session_store.base import InterviewSessionRecord, SessionStateStore
from app.services.task_interview.session_store.memory import InMemorySessionStateStore

__all__ = ["InMemorySessionStateStore", "InterviewSessionRecord", "SessionStateStore"]
