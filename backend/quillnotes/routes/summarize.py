"""
QuillNotes Backend - Summarize Route Handler
==============================================

What:  POST /summarize, the summarization gateway.
How:   Reads the JSON body, delegates to the summary service, and maps every
       failure to one of two fixed bodies:

           200 {"summary": "..."}
           400 {"error": "Content is required"}   content missing, non-string or blank
           500 {"error": "Failed to generate summary"}   body not JSON, or upstream failure

The gateway is stateless across calls. Failures are answered here, at the
boundary, rather than by the global handlers, because the body shape is
fixed by the contract above and carries no request_id or details. The body
is parsed by hand for the same reason: a schema failure would otherwise
surface as the /api-style validation body.
"""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from quillnotes.exceptions import SummarizationError, ValidationError
from quillnotes.schemas.note import (
    SummarizeRequest,
    SummaryErrorResponse,
    SummaryResponse,
)
from quillnotes.services.summary_service import summary_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Summarize"])

CONTENT_REQUIRED = "Content is required"
SUMMARY_FAILED = "Failed to generate summary"


@router.post(
    "/summarize",
    response_model=SummaryResponse,
    responses={
        400: {"description": "Missing or empty content", "model": SummaryErrorResponse},
        500: {"description": "Summary could not be generated", "model": SummaryErrorResponse},
    },
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": SummarizeRequest.model_json_schema()}},
        }
    },
    summary="Summarize note content in one paragraph",
)
async def summarize(request: Request):
    try:
        body = await request.json()
    except ValueError:
        logger.warning("Summarize request body is not valid JSON")
        return JSONResponse(status_code=500, content={"error": SUMMARY_FAILED})

    # Arrays, strings and numbers carry no `content` field
    content = body.get("content") if isinstance(body, dict) else None
    try:
        summary = await summary_service.summarize(content)
    except ValidationError:
        return JSONResponse(status_code=400, content={"error": CONTENT_REQUIRED})
    except SummarizationError as e:
        # Cause was already logged by the service; keep a route-level trace
        logger.error("Summarize request failed: %s", e.context or e.message)
        return JSONResponse(status_code=500, content={"error": SUMMARY_FAILED})

    return SummaryResponse(summary=summary)
