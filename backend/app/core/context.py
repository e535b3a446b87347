"""Per-request context utilities."""
from __future__ import annotations

from contextvars import ContextVar

request_id_ctx_var: ContextVar[str | None] = ContextVar("request_id", default=None)
session_key_ctx_var: ContextVar[str | None] = ContextVar("session_key", default=None)


def get_request_id() -> str | None:
    """Return the current request id if available."""
    return request_id_ctx_var.get()


def get_session_key() -> str | None:
    """Return the interview session key bound to the current request, if any."""
    return session_key_ctx_var.get()
