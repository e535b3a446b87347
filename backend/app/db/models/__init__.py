"""ORM models exposed for metadata discovery."""
from app.db.models.interview_session import InterviewSession

__all__ = [
    "InterviewSession",
]
