"""Process-local session state store."""
from __future__ import annotations

import logging
from typing import Dict, Optional

from app.services.task_interview.session_store.base import InterviewSessionRecord, SessionStateStore

logger = logging.getLogger(__name__)


class InMemorySessionStateStore(SessionStateStore):
    """Plain dict, no locking and no expiry."""

    def __init__(self) -> None:
        self._records: Dict[str, InterviewSessionRecord] = {}

    def put(self, key: str, record: InterviewSessionRecord) -> None:
        self._records[key] = record
        logger.debug("Session %s stored (phase=%s)", key, record.interview_phase)

    def get(self, key: str) -> Optional[InterviewSessionRecord]:
        return self._records.get(key)

    def __len__(self) -> int:
        return len(self._records)
