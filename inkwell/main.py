"""
Inkwell Backend - FastAPI Application Factory
=============================================

What:  Builds the FastAPI application: middleware, exception handlers, routes,
       and the lifespan that configures logging and closes MongoDB on exit.
How:   create_app() returns a configured instance; `app` is the module-level
       instance uvicorn serves (uvicorn inkwell.main:app).

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware: Rate Limit → Request ID → Access Log        │
    │              → GZip → CORS                               │
    │                                                          │
    │  Routes:                                                 │
    │    /blogs ...            blogs.py     (CRUD, listings,   │
    │                                        search)           │
    │    /blogs/react/{id}     reactions.py                    │
    │    /blog/react-status    reactions.py                    │
    │    /, /health            health.py                       │
    │                                                          │
    │  Exception Handlers:                                     │
    │    ValidationError, bad body/query → 400                 │
    │    NotFoundError → 404    RateLimitExceeded → 429        │
    │    DatabaseError, anything else → 500                    │
    └──────────────────────────────────────────────────────────┘

Every error body has the shape {"error": ..., "details": ..., "request_id": ...}.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from inkwell import __version__
from inkwell.config import settings
from inkwell.database import db_gateway
from inkwell.exceptions import (
    DatabaseError,
    InkwellError,
    NotFoundError,
    RateLimitExceededError,
    ValidationError,
)
from inkwell.middleware.logging import RequestLoggingMiddleware
from inkwell.middleware.rate_limit import RateLimitMiddleware
from inkwell.middleware.request_id import RequestIDMiddleware, request_id_var
from inkwell.routes import blogs, health, reactions

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure the root logger once for the whole process.

    Format: 2024-01-15T12:00:00 [INFO] inkwell.services.blog_service: Blog created: ...
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: logging, configuration sanity check, banner.
    Shutdown: close the shared MongoDB client.

    The database connection itself is opened lazily by the first request that
    needs it, not here.
    """
    setup_logging()
    logger.info("Inkwell Backend %s starting up", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.warning("Configuration warning: %s", str(e))

    if not settings.featured_ids_list:
        logger.info("FEATURED_BLOG_IDS is empty; /blogs/featured will return []")

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("Inkwell Backend shutting down...")
    db_gateway.close()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_response(
    status_code: int,
    error: str,
    details: Optional[Any] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    content: Dict[str, Any] = {"error": error}
    if details:
        content["details"] = details
    content["request_id"] = request_id_var.get("")
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to status codes.

        ValidationError         → 400
        RequestValidationError  → 400 (malformed JSON, wrong types)
        NotFoundError           → 404
        RateLimitExceededError  → 429
        DatabaseError           → 500, driver message in `details`
        InkwellError            → 500
        Exception               → 500 (only errors raised outside RequestIDMiddleware;
                                   it renders the rest with the request id)
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return error_response(400, exc.message, exc.context)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        details = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
            for err in exc.errors()
        ]
        logger.warning("[%s] Invalid request: %s", request_id_var.get(""), details)
        return error_response(400, "Invalid request", details)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return error_response(404, exc.message)

    @app.exception_handler(RateLimitExceededError)
    async def handle_rate_limit(request: Request, exc: RateLimitExceededError):
        return error_response(
            429, exc.message, exc.context, headers={"Retry-After": str(exc.retry_after)}
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | %s", request_id_var.get(""), exc.message, exc.details
        )
        return error_response(500, exc.message, exc.details)

    @app.exception_handler(InkwellError)
    async def handle_inkwell_error(request: Request, exc: InkwellError):
        logger.error("[%s] %s: %s", request_id_var.get(""), type(exc).__name__, exc.message)
        return error_response(500, exc.message, exc.context)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s", request_id_var.get(""), str(exc), exc_info=True
        )
        return error_response(500, "Internal server error", str(exc))


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="Inkwell API",
        description=(
            "Blog API: create, list, react to and fuzzy-search blog posts stored in MongoDB."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware runs in reverse order of addition: the last added is outermost
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(RateLimitMiddleware)

    register_exception_handlers(app)

    app.include_router(blogs.router)
    app.include_router(reactions.router)
    app.include_router(health.router)

    return app


app = create_app()
