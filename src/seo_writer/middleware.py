# -*- coding: utf-8 -*-
"""
Request tracking middleware and logging context variables.
"""
import logging
import time
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from .config import config

logger = logging.getLogger(__name__)

# Context variables (accessible across async calls and copied into tasks)
request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
session_id_ctx: ContextVar[str | None] = ContextVar("session_id", default=None)


def get_request_id() -> str | None:
    """Get current request ID from context."""
    return request_id_ctx.get()


def get_session_id() -> str | None:
    """Get the generation session ID bound to the current task."""
    return session_id_ctx.get()


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Tag each request with an ID and log its duration."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(config.REQUEST_ID_HEADER) or str(uuid.uuid4())
        token = request_id_ctx.set(request_id)
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
            response.headers[config.REQUEST_ID_HEADER] = request_id
            logger.debug(
                "Request handled",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": int((time.perf_counter() - start_time) * 1000),
                },
            )
            return response
        finally:
            request_id_ctx.reset(token)
