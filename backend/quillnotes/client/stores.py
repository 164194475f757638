"""
QuillNotes Client - Note Store Clients
========================================

What:  Typed wrappers over note CRUD used by the NoteController.
How:   Every operation returns Ok(value) or Err(QuillNotesError); nothing
       raises to the caller.

Implementations:
    - HttpNoteStore:     talks to the backend's /api/notes routes over httpx
    - InMemoryNoteStore: non-persisted variant (ids derived from the creation
                         timestamp), used for offline runs and tests

Both reject blank title/content on create (and blank values on update), and
titles longer than TITLE_MAX_LENGTH, before doing any I/O.
"""

import logging
import time
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx

from quillnotes.client.results import Err, Ok, Result
from quillnotes.exceptions import (
    NotFoundError,
    StoreError,
    ValidationError,
)
from quillnotes.schemas.note import TITLE_MAX_LENGTH, TITLE_TOO_LONG
from quillnotes.schemas.note import NoteResponse as Note

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("title", "content", "summary")


def _check_title_length(title: str) -> Optional[ValidationError]:
    if len(title) > TITLE_MAX_LENGTH:
        return ValidationError(message=TITLE_TOO_LONG, field="title")
    return None


def check_new_note(title: Optional[str], content: Optional[str]) -> Optional[ValidationError]:
    if not (title or "").strip():
        return ValidationError(message="Please fill in both title and content", field="title")
    if not (content or "").strip():
        return ValidationError(message="Please fill in both title and content", field="content")
    return _check_title_length(title)


def check_changes(changes: Dict[str, Any]) -> Optional[ValidationError]:
    if not changes:
        return ValidationError(message="Nothing to update")
    unknown = set(changes) - set(UPDATABLE_FIELDS)
    if unknown:
        return ValidationError(message=f"Cannot update field(s): {', '.join(sorted(unknown))}")
    for field, value in changes.items():
        if value is None or not str(value).strip():
            return ValidationError(message=f"{field.capitalize()} cannot be empty", field=field)
    if "title" in changes:
        return _check_title_length(str(changes["title"]))
    return None


class NoteStore(ABC):
    """
    Contract:
        list()   newest first; Err(StoreError) on failure
        create() Err(ValidationError) for blank input, without I/O
        get()    Err(NotFoundError) when missing
        update() partial; Err(NotFoundError) when missing
        delete() Err(NotFoundError) when missing (callers treat it as done)
    """

    @abstractmethod
    async def list(self) -> Result[List[Note]]:
        ...

    @abstractmethod
    async def create(
        self, title: str, content: str, owner: Optional[str] = None
    ) -> Result[Note]:
        ...

    @abstractmethod
    async def get(self, note_id: int) -> Result[Note]:
        ...

    @abstractmethod
    async def update(self, note_id: int, changes: Dict[str, Any]) -> Result[Note]:
        ...

    @abstractmethod
    async def delete(self, note_id: int) -> Result[None]:
        ...


# ══════════════════════════════════════════════════════════════════════════
# HTTP store
# ══════════════════════════════════════════════════════════════════════════


class HttpNoteStore(NoteStore):
    """
    Note store backed by the QuillNotes REST API.

    Response mapping:
        2xx                → Ok
        400 / 422          → Err(ValidationError) with the server's message
        404                → Err(NotFoundError)
        other / transport  → Err(StoreError), cause logged only
    """

    def __init__(self, http: httpx.AsyncClient):
        self.http = http

    async def _request(
        self, method: str, path: str, note_id: Optional[int] = None, **kwargs: Any
    ) -> Result[httpx.Response]:
        try:
            response = await self.http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error("%s %s failed: %s: %s", method, path, type(e).__name__, str(e))
            return Err(StoreError(context={"error_type": type(e).__name__}))

        if response.is_success:
            return Ok(response)

        message = _error_message(response)
        # 422 is FastAPI's default for schema failures; both mean bad input
        if response.status_code in (400, 422):
            return Err(ValidationError(message=message or "Validation failed"))
        if response.status_code == 404:
            return Err(NotFoundError(resource="note", resource_id=note_id))

        logger.error(
            "%s %s returned %d (request %s)",
            method,
            path,
            response.status_code,
            response.headers.get("X-Request-ID", "-"),
        )
        return Err(StoreError(context={"status": response.status_code}))

    async def list(self) -> Result[List[Note]]:
        result = await self._request("GET", "/api/notes")
        if not result.is_ok:
            return result
        try:
            payload = result.value.json()
            return Ok([Note.model_validate(item) for item in payload["notes"]])
        except (ValueError, KeyError, TypeError) as e:
            logger.error("Malformed note list response: %s", str(e))
            return Err(StoreError(context={"reason": "malformed_response"}))

    async def create(
        self, title: str, content: str, owner: Optional[str] = None
    ) -> Result[Note]:
        invalid = check_new_note(title, content)
        if invalid:
            return Err(invalid)
        body = {"title": title, "content": content}
        if owner is not None:
            body["owner"] = owner
        return self._note(await self._request("POST", "/api/notes", json=body))

    async def get(self, note_id: int) -> Result[Note]:
        return self._note(await self._request("GET", f"/api/notes/{note_id}", note_id))

    async def update(self, note_id: int, changes: Dict[str, Any]) -> Result[Note]:
        invalid = check_changes(changes)
        if invalid:
            return Err(invalid)
        return self._note(
            await self._request("PATCH", f"/api/notes/{note_id}", note_id, json=changes)
        )

    async def delete(self, note_id: int) -> Result[None]:
        result = await self._request("DELETE", f"/api/notes/{note_id}", note_id)
        return result if not result.is_ok else Ok(None)

    @staticmethod
    def _note(result: Result[httpx.Response]) -> Result[Note]:
        if not result.is_ok:
            return result
        try:
            return Ok(Note.model_validate(result.value.json()))
        except ValueError as e:
            logger.error("Malformed note response: %s", str(e))
            return Err(StoreError(context={"reason": "malformed_response"}))


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return ""
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or "")
    return ""


# ══════════════════════════════════════════════════════════════════════════
# In-memory store
# ══════════════════════════════════════════════════════════════════════════


class InMemoryNoteStore(NoteStore):
    """
    Non-persisted note store.

    Ids are the creation time in milliseconds, bumped by one when two notes
    land in the same millisecond, so they stay unique and increasing.
    `calls` counts operations per name; tests use it to prove that invalid
    input never reached the store.
    """

    def __init__(self) -> None:
        self._notes: Dict[int, Note] = {}
        self._last_id = 0
        self.calls: Dict[str, int] = {}

    def _count(self, name: str) -> None:
        self.calls[name] = self.calls.get(name, 0) + 1

    def _next_id(self) -> int:
        candidate = time.time_ns() // 1_000_000
        self._last_id = max(candidate, self._last_id + 1)
        return self._last_id

    async def list(self) -> Result[List[Note]]:
        self._count("list")
        notes = sorted(
            self._notes.values(), key=lambda n: (n.created_at, n.id), reverse=True
        )
        return Ok(notes)

    async def create(
        self, title: str, content: str, owner: Optional[str] = None
    ) -> Result[Note]:
        invalid = check_new_note(title, content)
        if invalid:
            return Err(invalid)
        self._count("create")
        note = Note(
            id=self._next_id(),
            title=title,
            content=content,
            created_at=datetime.now(timezone.utc),
            owner=owner,
        )
        self._notes[note.id] = note
        return Ok(note)

    async def get(self, note_id: int) -> Result[Note]:
        self._count("get")
        note = self._notes.get(note_id)
        if note is None:
            return Err(NotFoundError(resource="note", resource_id=note_id))
        return Ok(note)

    async def update(self, note_id: int, changes: Dict[str, Any]) -> Result[Note]:
        invalid = check_changes(changes)
        if invalid:
            return Err(invalid)
        self._count("update")
        note = self._notes.get(note_id)
        if note is None:
            return Err(NotFoundError(resource="note", resource_id=note_id))
        updated = note.model_copy(update=changes)
        self._notes[note_id] = updated
        return Ok(updated)

    async def delete(self, note_id: int) -> Result[None]:
        self._count("delete")
        if self._notes.pop(note_id, None) is None:
            return Err(NotFoundError(resource="note", resource_id=note_id))
        return Ok(None)
