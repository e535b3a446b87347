"""Interview session state ORM model."""
from __future__ import annotations

from sqlalchemy import Column, DateTime, Text, func

from app.db.base import Base
from app.db.types import JSONBCompat


class InterviewSession(Base):
    """Latest interview analysis for a session key; rows are overwritten, never appended."""

    __tablename__ = "interview_sessions"

    session_key = Column(Text, primary_key=True)
    payload = Column(JSONBCompat, nullable=False, default=dict)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
