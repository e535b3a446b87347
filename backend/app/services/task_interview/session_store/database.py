"""SQLAlchemy-backed session state store."""
from __future__ import annotations

import logging
from typing import Callable, Optional

from sqlalchemy.orm import Session

from app.db.models.interview_session import InterviewSession
from app.services.task_interview.session_store.base import InterviewSessionRecord, SessionStateStore

logger = logging.getLogger(__name__)


class DatabaseSessionStateStore(SessionStateStore):
    """Stores one row per session key in ``interview_sessions``, overwriting on put."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def put(self, key: str, record: InterviewSessionRecord) -> None:
        db = self._session_factory()
        try:
            row = db.get(InterviewSession, key)
            if row is None:
                row = InterviewSession(session_key=key, payload=record.to_dict())
                db.add(row)
            else:
                row.payload = record.to_dict()
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
        logger.debug("Session %s persisted (phase=%s)", key, record.interview_phase)

    def get(self, key: str) -> Optional[InterviewSessionRecord]:
        db = self._session_factory()
        try:
            row = db.get(InterviewSession, key)
            if row is None:
                return None
            return InterviewSessionRecord.from_dict(row.payload or {})
        finally:
            db.close()
