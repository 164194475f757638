"""
QuillNotes Backend - Note Service (Store Operations)
======================================================

What:  Create, read, update, delete and list notes against the database.
Why:   Keeps validation rules and persistence error translation out of the
       HTTP layer.
How:   Each method receives the request's AsyncSession, applies the note
       invariants, runs the query and converts driver failures into
       StoreError.

Rules enforced here:
    - title and content must be non-blank after trimming, on create and on
      update; nothing touches the database when they are blank
    - titles are at most TITLE_MAX_LENGTH characters
    - an update must carry at least one field
    - a provided summary must be non-blank
    - missing ids raise NotFoundError (routes answer 404)
    - listing is newest first, ties broken by id so order is total

NoteService is stateless; the session is passed in per call.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from quillnotes.exceptions import NotFoundError, StoreError, ValidationError
from quillnotes.models.note import Note
from quillnotes.schemas.note import TITLE_MAX_LENGTH, TITLE_TOO_LONG

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("title", "content", "summary")


def _require_text(value: Optional[str], field: str, message: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(message=message, field=field)
    return value


def _check_title_length(title: str) -> None:
    if len(title) > TITLE_MAX_LENGTH:
        raise ValidationError(
            message=TITLE_TOO_LONG,
            field="title",
            context={"length": len(title)},
        )


class NoteService:
    """
    Business logic for note persistence.

    Error Handling Strategy:
        ValidationError and NotFoundError propagate as-is. Any SQLAlchemy
        failure is logged with its cause and re-raised as StoreError, which
        carries only a generic message to the client.
    """

    def validate_new_note(self, title: Optional[str], content: Optional[str]) -> None:
        _require_text(title, "title", "Please fill in both title and content")
        _require_text(content, "content", "Please fill in both title and content")
        _check_title_length(title)

    async def list_notes(self, db: AsyncSession) -> List[Note]:
        try:
            result = await db.execute(
                select(Note).order_by(desc(Note.created_at), desc(Note.id))
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing notes: %s", str(e), exc_info=True)
            raise StoreError(
                message="Could not retrieve notes. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def get_note(self, db: AsyncSession, note_id: int) -> Note:
        try:
            result = await db.execute(select(Note).where(Note.id == note_id))
            note = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching note %s: %s", note_id, str(e))
            raise StoreError(
                message="Could not retrieve the note. Please try again.",
                context={"note_id": note_id},
            )
        if note is None:
            raise NotFoundError(resource="note", resource_id=note_id)
        return note

    async def create_note(
        self,
        db: AsyncSession,
        title: Optional[str],
        content: Optional[str],
        owner: Optional[str] = None,
    ) -> Note:
        """
        Insert a new note.

        Validation runs before the session is touched, so a blank title or
        content never produces a database round trip.

        Raises:
            ValidationError: title or content blank after trimming
            StoreError: insert failed
        """
        self.validate_new_note(title, content)

        note = Note(title=title, content=content, owner=owner)
        try:
            db.add(note)
            await db.flush()
            await db.refresh(note)
        except SQLAlchemyError as e:
            logger.error("Database error creating note: %s", str(e), exc_info=True)
            raise StoreError(
                message="Failed to save note. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("Note %s created", note.id)
        return note

    async def update_note(
        self, db: AsyncSession, note_id: int, changes: Dict[str, Any]
    ) -> Note:
        """
        Apply a partial update.

        Args:
            changes: Subset of {title, content, summary}. Unknown keys are
                     rejected so a typo cannot silently do nothing.

        Raises:
            ValidationError: empty change set, unknown field, or a blank value
            NotFoundError: no note with this id
            StoreError: query or flush failed
        """
        unknown = set(changes) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError(
                message=f"Cannot update field(s): {', '.join(sorted(unknown))}",
                context={"fields": sorted(unknown)},
            )
        if not changes:
            raise ValidationError(message="Nothing to update")

        if "title" in changes:
            _require_text(changes["title"], "title", "Title cannot be empty")
            _check_title_length(changes["title"])
        if "content" in changes:
            _require_text(changes["content"], "content", "Content cannot be empty")
        if "summary" in changes:
            _require_text(changes["summary"], "summary", "Summary cannot be empty")

        note = await self.get_note(db, note_id)
        for field, value in changes.items():
            setattr(note, field, value)

        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating note %s: %s", note_id, str(e), exc_info=True)
            raise StoreError(
                message="Failed to update note. Please try again.",
                context={"note_id": note_id, "error_type": type(e).__name__},
            )

        logger.info("Note %s updated (%s)", note_id, ", ".join(sorted(changes)))
        return note

    async def delete_note(self, db: AsyncSession, note_id: int) -> None:
        """
        Delete a note.

        Raises NotFoundError when nothing was deleted; clients are expected
        to treat that as success and refresh.
        """
        try:
            result = await db.execute(delete(Note).where(Note.id == note_id))
        except SQLAlchemyError as e:
            logger.error("Database error deleting note %s: %s", note_id, str(e))
            raise StoreError(
                message="Failed to delete note. Please try again.",
                context={"note_id": note_id},
            )
        if result.rowcount == 0:
            raise NotFoundError(resource="note", resource_id=note_id)
        logger.info("Note %s deleted", note_id)


note_service = NoteService()
