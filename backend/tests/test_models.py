from app.db.base import Base
from app.db import models  # noqa: F401  ensure models are loaded


def test_metadata_contains_interview_sessions() -> None:
    table = Base.metadata.tables["interview_sessions"]

    assert [column.name for column in table.primary_key.columns] == ["session_key"]
    assert {"payload", "updated_at"}.issubset(table.columns.keys())
