"""
Inkwell Backend - Request ID Middleware
=======================================

What:  Tags every request with a short correlation id.
How:   Reuses the caller's X-Request-ID header when present, otherwise makes
       one from a UUID4. The id is stored in a ContextVar (read by the access
       log and the exception handlers), on `request.state`, and echoed back in
       the X-Request-ID response header.

Exceptions no application handler claimed are rendered here as a 500 error
body. Starlette's own server-error layer sits outside this middleware and
would answer without the id.
"""

import logging
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Coroutine-local: concurrent requests on one event loop each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or new_request_id()
        request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "[%s] Unhandled error on %s %s: %s",
                rid,
                request.method,
                request.url.path,
                str(exc),
                exc_info=True,
            )
            response = JSONResponse(
                status_code=500,
                content={
                    "error": "Internal server error",
                    "details": str(exc),
                    "request_id": rid,
                },
            )
        response.headers[REQUEST_ID_HEADER] = rid
        return response
