"""
QuillNotes Backend - Request ID Middleware
============================================

What:  Assigns a correlation ID to each request and echoes it back.
Why:   Error bodies from /api routes carry the same ID, so a user-facing
       alert can be matched to the server log line that holds the cause.
How:   Reuses a client-supplied X-Request-ID when it looks sane, otherwise
       generates a short UUID; stores it in a ContextVar and request.state.
"""

import re
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

REQUEST_ID_HEADER = "X-Request-ID"

# Client IDs end up in log lines; keep them short and printable
_VALID_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


def new_request_id() -> str:
    return str(uuid.uuid4())[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Sets request_id_var for the duration of the request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        supplied = request.headers.get(REQUEST_ID_HEADER, "")
        rid = supplied if _VALID_ID.match(supplied) else new_request_id()

        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
