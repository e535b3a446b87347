"""Custom FastAPI middleware."""
from __future__ import annotations

from typing import Callable
from uuid import uuid4

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.context import request_id_ctx_var, session_key_ctx_var

SESSION_HEADER = "X-Interview-Session"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Bind request id and interview session key to the logging context.

    The request id is echoed back in ``X-Request-Id``. The session header is
    optional; interview routes also read it as the default session key.
    """

    async def dispatch(self, request: Request, call_next: Callable[[Request], Response]) -> Response:  # type: ignore[override]
        request_id = request.headers.get("X-Request-Id") or str(uuid4())
        request.state.request_id = request_id
        session_key = request.headers.get(SESSION_HEADER)
        request_token = request_id_ctx_var.set(request_id)
        session_token = session_key_ctx_var.set(session_key)

        try:
            response = await call_next(request)
        finally:
            session_key_ctx_var.reset(session_token)
            request_id_ctx_var.reset(request_token)

        response.headers["X-Request-Id"] = request_id
        return response
