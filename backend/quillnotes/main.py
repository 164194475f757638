"""
QuillNotes Backend - FastAPI Application Factory
==================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() registers middleware, exception handlers and routers.
Who:   uvicorn quillnotes.main:app

Exception Handlers:
    ValidationError     → 400 validation_error
    RequestValidationError → 400 validation_error (schema failures, not 422)
    NotFoundError       → 404 not_found
    StoreError          → 500 server_error (generic message)
    SummarizationError  → 500 summarization_error (generic message)
    Exception           → 500 internal_server_error

    POST /summarize answers its own failures with the fixed gateway bodies;
    these handlers serve the /api routes.

Lifecycle:
    Startup:  logging, configuration check (non-fatal), ready banner
    Shutdown: dispose database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from quillnotes import __version__
from quillnotes.config import settings
from quillnotes.database import dispose_engine
from quillnotes.exceptions import (
    NotFoundError,
    QuillNotesError,
    StoreError,
    SummarizationError,
    ValidationError,
)
from quillnotes.middleware.logging import RequestLoggingMiddleware
from quillnotes.middleware.request_id import RequestIDMiddleware, request_id_var
from quillnotes.routes import health, notes, summarize

logger = logging.getLogger(__name__)


def setup_logging() -> None:
    """
    Configure process-wide logging once, before anything else logs.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # These log every request/query at INFO or DEBUG
    for noisy in ("uvicorn.access", "sqlalchemy.engine", "httpcore", "httpx", "openai"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("=" * 60)
    logger.info("QuillNotes backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Not fatal: notes still work and /health reports the gap
        logger.error("Configuration error: %s", str(e))

    logger.info("Summarization model: %s", settings.openai_model)
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("QuillNotes backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


def _request_id(request: Request) -> str:
    # The catch-all handler runs outside the middleware stack, where the
    # ContextVar has already been reset; request.state still has the ID
    return request_id_var.get("") or getattr(request.state, "request_id", "")


def _describe_schema_error(error: Dict[str, Any]) -> Dict[str, str]:
    """One pydantic error entry → {field, message}, without echoing the input."""
    loc = error.get("loc") or ()
    field = str(loc[-1]) if loc and loc[-1] != "body" else "body"
    if error.get("type") == "string_too_long":
        max_length = (error.get("ctx") or {}).get("max_length")
        message = f"{field.capitalize()} must be at most {max_length} characters"
    else:
        message = f"{field.capitalize()}: {error.get('msg', 'invalid value')}"
    return {"field": field, "message": message}


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map the exception hierarchy to HTTP responses.

    Security: responses carry `exc.message` (always safe) or a generic text;
    `exc.context` is logged server-side and only echoed for validation
    errors, where it names the offending field.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = _request_id(request)
        logger.warning("[%s] Validation error: %s", rid, exc.message)
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": exc.message,
                "details": exc.context,
                "request_id": rid,
            },
        )

    @app.exception_handler(RequestValidationError)
    async def handle_schema_error(request: Request, exc: RequestValidationError):
        # Schema failures are caller input errors too: same 400 body as above
        rid = _request_id(request)
        errors = [_describe_schema_error(e) for e in exc.errors()]
        message = errors[0]["message"] if errors else "Validation failed"
        logger.warning("[%s] Request validation error: %s", rid, message)
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": message,
                "details": {"errors": errors},
                "request_id": rid,
            },
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        rid = _request_id(request)
        logger.info("[%s] Not found: %s", rid, exc.message)
        return JSONResponse(
            status_code=404,
            content={
                "error": "not_found",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError):
        rid = _request_id(request)
        logger.error("[%s] Store error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": "An internal error occurred. Please try again later.",
                "request_id": rid,
            },
        )

    @app.exception_handler(SummarizationError)
    async def handle_summarization_error(request: Request, exc: SummarizationError):
        rid = _request_id(request)
        logger.error("[%s] Summarization error | Context: %s", rid, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "summarization_error",
                "message": "Failed to generate summary",
                "request_id": rid,
            },
        )

    @app.exception_handler(QuillNotesError)
    async def handle_app_error(request: Request, exc: QuillNotesError):
        rid = _request_id(request)
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = _request_id(request)
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again.",
                "request_id": rid,
            },
        )


def create_app() -> FastAPI:
    """
    Assemble the application.

    Middleware executes in reverse order of addition, so the request ID is
    assigned before the access logger reads it.
    """
    app = FastAPI(
        title="QuillNotes API",
        description="Personal notes with one-click AI summaries.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Total-Count"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(notes.router)
    app.include_router(summarize.router)
    app.include_router(health.router)

    return app


app = create_app()
