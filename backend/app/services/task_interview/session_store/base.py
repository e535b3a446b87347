"""Session state store interface."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class InterviewSessionRecord:
    """Compact summary of the last analysis for a session key."""

    session_key: str
    last_update: str
    interview_phase: str
    completed_topics: List[str] = field(default_factory=list)
    task_count: int = 0
    conversation_length: int = 0
    readiness_score: int = 0
    fallback_used: bool = False
    last_response: Optional[Dict[str, int]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "session_key": self.session_key,
            "last_update": self.last_update,
            "interview_phase": self.interview_phase,
            "completed_topics": list(self.completed_topics),
            "task_count": self.task_count,
            "conversation_length": self.conversation_length,
            "readiness_score": self.readiness_score,
            "fallback_used": self.fallback_used,
            "last_response": dict(self.last_response) if self.last_response else None,
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "InterviewSessionRecord":
        return cls(
            session_key=str(payload.get("session_key", "")),
            last_update=str(payload.get("last_update", "")),
            interview_phase=str(payload.get("interview_phase", "INIT")),
            completed_topics=list(payload.get("completed_topics") or []),
            task_count=int(payload.get("task_count") or 0),
            conversation_length=int(payload.get("conversation_length") or 0),
            readiness_score=int(payload.get("readiness_score") or 0),
            fallback_used=bool(payload.get("fallback_used", False)),
            last_response=payload.get("last_response"),
        )


class SessionStateStore:
    """Keyed store of the latest InterviewSessionRecord.

    ``put`` overwrites; concurrent writers race with last-writer-wins semantics.
    """

    def put(self, key: str, record: InterviewSessionRecord) -> None:
        raise NotImplementedError

    def get(self, key: str) -> Optional[InterviewSessionRecord]:
        raise NotImplementedError
