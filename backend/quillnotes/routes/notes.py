"""
QuillNotes Backend - Notes Route Handlers
===========================================

What:  REST surface of the note store.
How:   Each handler delegates to NoteService and serializes the ORM row.
       Errors raised by the service are formatted by the global handlers
       registered in main.py (400 / 404 / 500).

Routes:
    GET    /api/notes          list, newest first (+ X-Total-Count)
    POST   /api/notes          create
    GET    /api/notes/{id}     fetch one
    PATCH  /api/notes/{id}     partial update ({title, content} or {summary})
    DELETE /api/notes/{id}     delete (404 when already gone)

Mutations are never cached; clients re-list after every write.
"""

import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from quillnotes.database import get_db_session
from quillnotes.schemas.note import (
    ErrorResponse,
    NoteCreate,
    NoteListResponse,
    NoteResponse,
    NoteUpdate,
)
from quillnotes.services.note_service import note_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Notes"])


@router.get(
    "/notes",
    response_model=NoteListResponse,
    responses={500: {"description": "Store error", "model": ErrorResponse}},
    summary="List all notes, newest first",
)
async def list_notes(
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> NoteListResponse:
    notes = await note_service.list_notes(db)
    response.headers["X-Total-Count"] = str(len(notes))
    response.headers["Cache-Control"] = "no-store"
    return NoteListResponse(
        notes=[NoteResponse.model_validate(n) for n in notes],
        total_count=len(notes),
    )


@router.post(
    "/notes",
    status_code=201,
    response_model=NoteResponse,
    responses={
        400: {"description": "Blank title or content", "model": ErrorResponse},
        500: {"description": "Store error", "model": ErrorResponse},
    },
    summary="Create a note",
)
async def create_note(
    payload: NoteCreate,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    note = await note_service.create_note(
        db, title=payload.title, content=payload.content, owner=payload.owner
    )
    return NoteResponse.model_validate(note)


@router.get(
    "/notes/{note_id}",
    response_model=NoteResponse,
    responses={
        404: {"description": "Note not found", "model": ErrorResponse},
        500: {"description": "Store error", "model": ErrorResponse},
    },
    summary="Get a single note by ID",
)
async def get_note(
    note_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    note = await note_service.get_note(db, note_id)
    return NoteResponse.model_validate(note)


@router.patch(
    "/notes/{note_id}",
    response_model=NoteResponse,
    responses={
        400: {"description": "Blank field or empty update", "model": ErrorResponse},
        404: {"description": "Note not found", "model": ErrorResponse},
        500: {"description": "Store error", "model": ErrorResponse},
    },
    summary="Update title/content or save a summary",
)
async def update_note(
    note_id: int,
    payload: NoteUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    note = await note_service.update_note(db, note_id, payload.changes())
    return NoteResponse.model_validate(note)


@router.delete(
    "/notes/{note_id}",
    status_code=204,
    responses={
        404: {"description": "Note not found", "model": ErrorResponse},
        500: {"description": "Store error", "model": ErrorResponse},
    },
    summary="Delete a note",
)
async def delete_note(
    note_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await note_service.delete_note(db, note_id)
    return Response(status_code=204)
