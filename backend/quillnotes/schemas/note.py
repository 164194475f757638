"""
QuillNotes Backend - Pydantic Request/Response Schemas
========================================================

What:  Pydantic models defining the HTTP contract between clients and backend.
Why:   Input parsing, response serialization and OpenAPI docs in one place.

Validation split:
    Schemas only check shape (types, lengths). Business rules such as
    "title must not be blank after trimming" live in NoteService and raise
    our own ValidationError, so every caller (REST route, tests, scripts)
    gets the same 400 response shape.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

# Matches the notes.title column width
TITLE_MAX_LENGTH = 255
TITLE_TOO_LONG = f"Title must be at most {TITLE_MAX_LENGTH} characters"


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(BaseModel):
    """Body of POST /api/notes."""
    title: str = Field(default="", max_length=TITLE_MAX_LENGTH, description="Note title (non-blank)")
    content: str = Field(default="", description="Note body (non-blank)")
    owner: Optional[str] = Field(default=None, max_length=255, description="Creator identifier")


class NoteUpdate(BaseModel):
    """
    Body of PATCH /api/notes/{id}.

    Only fields that are present are written. The two shapes the app uses
    are {title, content} (edit form) and {summary} (save summary).
    """
    title: Optional[str] = Field(default=None, max_length=TITLE_MAX_LENGTH)
    content: Optional[str] = Field(default=None)
    summary: Optional[str] = Field(default=None)

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude_none=True)


class SummarizeRequest(BaseModel):
    """
    Documents the body of POST /summarize in the OpenAPI schema.

    The route reads the JSON itself, so missing, non-string or unparsable
    input is answered with the gateway's fixed bodies rather than a schema
    error.
    """
    content: str = Field(description="Text to summarize")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """Full representation of a note."""
    id: int = Field(description="Database-assigned identifier")
    title: str
    content: str
    created_at: datetime = Field(description="Creation timestamp (UTC ISO 8601)")
    summary: Optional[str] = Field(default=None, description="Saved AI summary, if any")
    owner: Optional[str] = Field(default=None)

    model_config = {"from_attributes": True}


class NoteListResponse(BaseModel):
    """
    Response of GET /api/notes.

    The whole list is returned (newest first); clients refresh after every
    mutation instead of patching a local cache.
    """
    notes: List[NoteResponse]
    total_count: int


class SummaryResponse(BaseModel):
    summary: str


class SummaryErrorResponse(BaseModel):
    error: str


class ErrorResponse(BaseModel):
    """
    Standardized error body for the /api routes.

    Example:
        {
            "error": "validation_error",
            "message": "Title is required",
            "details": {"field": "title"},
            "request_id": "1a2b3c4d"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """
    GET /health body.

    `summarizer` reports credential presence only ("configured" / "missing").
    """
    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str
    database: str = Field(description="Database connectivity: connected, disconnected")
    summarizer: str = Field(description="Summarization credential: configured, missing")
    uptime_seconds: float


class CredentialCheckResponse(BaseModel):
    success: bool
    message: str
