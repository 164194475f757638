"""
QuillNotes Backend - Access Logging Middleware
================================================

What:  One log line per HTTP request: method, path, status, duration, request ID.
Why:   Failures are collapsed to generic messages for callers; the access line
       plus the service's error line is how an operator finds the cause.

Privacy:
    Logged:     method, path, status, duration, client IP, request ID
    Not logged: request/response bodies (note text, summaries), headers
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from quillnotes.middleware.request_id import request_id_var

logger = logging.getLogger("quillnotes.access")

# Polled every few seconds by orchestrators; logging them drowns real traffic
QUIET_PATHS = {"/health", "/health/credentials"}


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Must run inside RequestIDMiddleware so request_id_var is already set.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        client_ip = request.client.host if request.client else "unknown"
        rid = request_id_var.get("")
        status = response.status_code

        logger.log(
            level_for_status(status),
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response
