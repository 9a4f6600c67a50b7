"""
Inkwell Backend - Rate Limiting Middleware
==========================================

What:  Per-IP sliding-window limit on requests.
How:   Each client IP keeps a deque of request timestamps. Timestamps older
       than RATE_LIMIT_WINDOW are dropped on every request; when the deque
       already holds RATE_LIMIT_REQUESTS entries the request is answered with
       429 and a Retry-After header computed from the oldest timestamp.

State lives in process memory, so each worker process counts separately.
"""

import logging
import time
from collections import defaultdict, deque
from typing import Deque, Dict

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from inkwell.config import settings
from inkwell.exceptions import RateLimitExceededError
from inkwell.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)

# Idle IPs are purged every this many requests
SWEEP_EVERY = 1000


class RateLimitMiddleware(BaseHTTPMiddleware):
    EXEMPT_PATHS = {"/health", "/docs", "/openapi.json", "/redoc"}

    def __init__(self, app, **kwargs):
        super().__init__(app, **kwargs)
        self._hits: Dict[str, Deque[float]] = defaultdict(deque)
        self._seen = 0

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if not settings.rate_limit_enabled or request.url.path in self.EXEMPT_PATHS:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        now = time.monotonic()
        window = settings.rate_limit_window

        hits = self._hits[client_ip]
        while hits and hits[0] <= now - window:
            hits.popleft()

        if len(hits) >= settings.rate_limit_requests:
            retry_after = int(hits[0] + window - now) + 1
            logger.warning(
                "Rate limit exceeded for %s: %d requests in %ds",
                client_ip,
                len(hits),
                window,
            )
            return self._reject(RateLimitExceededError(retry_after=retry_after))

        hits.append(now)
        self._seen += 1
        if self._seen % SWEEP_EVERY == 0:
            self._sweep(now - window)

        return await call_next(request)

    @staticmethod
    def _reject(exc: RateLimitExceededError) -> JSONResponse:
        # Exception handlers sit inside the middleware stack, so render here
        return JSONResponse(
            status_code=429,
            content={
                "error": exc.message,
                "details": exc.context,
                "request_id": request_id_var.get(""),
            },
            headers={"Retry-After": str(exc.retry_after)},
        )

    def _sweep(self, cutoff: float) -> None:
        idle = [ip for ip, hits in self._hits.items() if not hits or hits[-1] <= cutoff]
        for ip in idle:
            del self._hits[ip]
        if idle:
            logger.debug("Purged %d idle rate-limit entries", len(idle))
