"""
Inkwell Backend - Health Check Route
====================================

What:  Liveness banner at / and a dependency-aware probe at /health.
How:   /health pings MongoDB through the shared gateway. The service is only
       "healthy" when the database answers; otherwise it reports "unhealthy"
       with HTTP 503 so load balancers route away from it.
Who:   Docker health checks, load balancers, uptime monitors.
"""

import logging
import time

from fastapi import APIRouter, Response, status

from inkwell import __version__
from inkwell.database import db_gateway
from inkwell.schemas.blog import HealthResponse, MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get("/", response_model=MessageResponse, summary="Service banner")
async def root() -> MessageResponse:
    return MessageResponse(message="Inkwell blog API is running")


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
)
async def health_check(response: Response) -> HealthResponse:
    db_ok = await db_gateway.ping()
    if not db_ok:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        logger.warning("Health check: database unreachable")

    return HealthResponse(
        status="healthy" if db_ok else "unhealthy",
        version=__version__,
        database="connected" if db_ok else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
