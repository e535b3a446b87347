from __future__ import annotations

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.models.interview_session import InterviewSession
from app.services.task_interview.session_store import factory as factory_module
from app.services.task_interview.session_store.base import InterviewSessionRecord
from app.services.task_interview.session_store.database import DatabaseSessionStateStore
from app.services.task_interview.session_store.memory import InMemorySessionStateStore


def _record(key: str = "s1", phase: str = "PRIORITY", **kwargs) -> InterviewSessionRecord:
    return InterviewSessionRecord(
        session_key=key,
        last_update="2026-10-19T09:00:00+00:00",
        interview_phase=phase,
        **kwargs,
    )


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    InterviewSession.__table__.create(bind=engine)
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


def test_memory_store_overwrites_by_key() -> None:
    store = InMemorySessionStateStore()

    store.put("s1", _record(phase="INIT"))
    store.put("s1", _record(phase="CONTEXT"))

    assert store.get("s1").interview_phase == "CONTEXT"
    assert store.get("missing") is None
    assert len(store) == 1


def test_database_store_round_trip(session_factory) -> None:
    store = DatabaseSessionStateStore(session_factory)
    record = _record(
        completed_topics=["priority"],
        task_count=3,
        conversation_length=2,
        readiness_score=42,
        fallback_used=True,
        last_response={"questions_generated": 1, "calendar_suggestions": 0, "next_steps": 3},
    )

    store.put("s1", record)

    assert store.get("s1") == record
    assert store.get("missing") is None


def test_database_store_overwrites_single_row(session_factory) -> None:
    store = DatabaseSessionStateStore(session_factory)

    store.put("s1", _record(phase="INIT"))
    store.put("s1", _record(phase="SCHEDULING", readiness_score=70))

    session = session_factory()
    try:
        rows = session.query(InterviewSession).all()
    finally:
        session.close()
    assert len(rows) == 1
    assert store.get("s1").interview_phase == "SCHEDULING"
    assert store.get("s1").readiness_score == 70


def test_factory_selects_provider(monkeypatch) -> None:
    factory_module.get_session_state_store.cache_clear()
    monkeypatch.setattr(factory_module.settings, "session_store_provider", "memory")
    try:
        assert isinstance(factory_module.get_session_state_store(), InMemorySessionStateStore)
        factory_module.get_session_state_store.cache_clear()

        monkeypatch.setattr(factory_module.settings, "session_store_provider", "redis")
        assert isinstance(factory_module.get_session_state_store(), InMemorySessionStateStore)
    finally:
        factory_module.get_session_state_store.cache_clear()
