"""
QuillNotes Backend - Health Check Routes
==========================================

What:  Liveness and dependency checks.
Why:   A missing completion credential should be visible before the first
       summarize call fails, without ever exposing the credential itself.

Status levels:
    - healthy:   database reachable and credential present
    - degraded:  database reachable, credential missing (notes work, summaries fail)
    - unhealthy: database unreachable
"""

import logging
import time

from fastapi import APIRouter
from sqlalchemy import text

from quillnotes import __version__
from quillnotes.database import engine
from quillnotes.schemas.note import CredentialCheckResponse, HealthResponse
from quillnotes.services.summary_service import summary_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check() -> HealthResponse:
    db_status = "connected"
    overall = "healthy"

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    summarizer_status = "configured" if summary_service.is_configured() else "missing"
    if summarizer_status == "missing" and overall == "healthy":
        overall = "degraded"

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        summarizer=summarizer_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )


@router.get(
    "/health/credentials",
    response_model=CredentialCheckResponse,
    summary="Report whether the summarization credential is configured",
)
async def credential_check() -> CredentialCheckResponse:
    configured = summary_service.is_configured()
    return CredentialCheckResponse(
        success=configured,
        message="API key is configured" if configured else "API key is missing",
    )
