"""Session state store factory."""
from __future__ import annotations

import logging
from functools import lru_cache

from app.core.config import settings
from app.services.task_interview.session_store.base import SessionStateStore
from app.services.task_interview.session_store.memory import InMemorySessionStateStore

logger = logging.getLogger(__name__)


@lru_cache
def get_session_state_store() -> SessionStateStore:
    provider = settings.session_store_provider.lower()
    if provider == "database":
        from app.db.session import SessionLocal
        from app.services.task_interview.session_store.database import DatabaseSessionStateStore

        return DatabaseSessionStateStore(SessionLocal)
    if provider != "memory":
        logger.warning("Unknown session store provider %r; using in-memory store.", provider)
    return InMemorySessionStateStore()
