"""
QuillNotes Client - Note/Dialog Controller
============================================

What:  Orchestrates note CRUD and the summarize-then-save flow for one user
       session.
How:   Holds an AppState and changes it only through the methods below.
       Each method awaits its store/gateway call and then applies the
       outcome; failures become alerts (or the dialog error) and never
       propagate.
Who:   A UI layer calls these methods from user actions and renders
       `controller.state`.

Concurrency:
    Single event loop, suspension only at store/gateway awaits.
    - summarize: a newer request supersedes an older one; the older
      response is discarded when it arrives (request_token guard)
    - submit, save, delete: one in flight per action; repeated calls while
      one is pending return False without doing anything
    - nothing is cancelled; late responses are simply ignored

Every successful mutation is followed by a full refresh of the note list.
"""

import logging
from typing import List, Optional, Set

from quillnotes.client.gateway import SummaryGateway
from quillnotes.client.results import Err
from quillnotes.client.state import (
    Alert,
    AlertKind,
    AppState,
    DialogState,
    FormState,
    SummaryPhase,
)
from quillnotes.client.stores import NoteStore
from quillnotes.exceptions import NotFoundError, QuillNotesError, ValidationError
from quillnotes.schemas.note import NoteResponse as Note

logger = logging.getLogger(__name__)

SUMMARY_FAILED = "Failed to generate summary. Please try again."
FORM_INCOMPLETE = "Please fill in both title and content"
NO_NOTE_SELECTED = "No note selected"
SUMMARY_EMPTY = "Summary cannot be empty"
SAVE_SUMMARY_FAILED = "Failed to save summary. Please try again."
NOTE_GONE = "This note no longer exists."


class NoteController:

    def __init__(
        self,
        store: NoteStore,
        gateway: SummaryGateway,
        owner: Optional[str] = None,
    ):
        self.store = store
        self.gateway = gateway
        self.owner = owner
        self.state = AppState()
        self._pending: Set[str] = set()

    # ── Alerts ────────────────────────────────────────────────────────────

    def _alert(self, kind: AlertKind, message: str) -> None:
        logger.debug("Alert (%s): %s", kind.value, message)
        self.state.alerts.append(Alert(kind=kind, message=message))

    def _alert_error(self, error: QuillNotesError, message: Optional[str] = None) -> None:
        if isinstance(error, ValidationError):
            kind = AlertKind.VALIDATION
        elif isinstance(error, NotFoundError):
            kind = AlertKind.NOT_FOUND
        else:
            kind = AlertKind.STORE
        self._alert(kind, message or error.message)

    def take_alerts(self) -> List[Alert]:
        alerts, self.state.alerts = self.state.alerts, []
        return alerts

    # ── In-flight bookkeeping ─────────────────────────────────────────────

    def _begin(self, action: str) -> bool:
        if action in self._pending:
            logger.debug("Ignoring %s: already in flight", action)
            return False
        self._pending.add(action)
        return True

    def _end(self, action: str) -> None:
        self._pending.discard(action)

    def is_pending(self, action: str) -> bool:
        return action in self._pending

    # ── Note list ─────────────────────────────────────────────────────────

    async def refresh(self) -> bool:
        """Replace the note list; on failure keep the current one and alert."""
        result = await self.store.list()
        if isinstance(result, Err):
            logger.warning("Refresh failed: %s", result.error.message)
            self._alert_error(result.error)
            return False
        self.state.notes = list(result.value)
        return True

    # ── Edit form ─────────────────────────────────────────────────────────

    def set_title(self, title: str) -> None:
        self.state.form = FormState(
            title=title,
            content=self.state.form.content,
            edit_target_id=self.state.form.edit_target_id,
        )

    def set_content(self, content: str) -> None:
        self.state.form = FormState(
            title=self.state.form.title,
            content=content,
            edit_target_id=self.state.form.edit_target_id,
        )

    def begin_edit(self, note: Note) -> None:
        self.state.form = FormState(
            title=note.title, content=note.content, edit_target_id=note.id
        )

    def cancel_edit(self) -> None:
        self.state.form = FormState()

    async def submit_note(self) -> bool:
        """
        Create a note, or update the one being edited.

        Blank title or content raises a validation alert and never reaches
        the store. On success the form is cleared and the list refreshed.
        """
        form = self.state.form
        if not form.title.strip() or not form.content.strip():
            self._alert(AlertKind.VALIDATION, FORM_INCOMPLETE)
            return False
        if not self._begin("submit"):
            return False

        try:
            if form.is_editing:
                result = await self.store.update(
                    form.edit_target_id, {"title": form.title, "content": form.content}
                )
            else:
                result = await self.store.create(form.title, form.content, owner=self.owner)
        finally:
            self._end("submit")

        if isinstance(result, Err):
            self._alert_error(result.error)
            if isinstance(result.error, NotFoundError):
                # Edited note was deleted meanwhile; keep the text, drop the target
                self.state.form = FormState(title=form.title, content=form.content)
                await self.refresh()
            return False

        self.state.form = FormState()
        await self.refresh()
        return True

    # ── Delete ────────────────────────────────────────────────────────────

    async def delete_note(self, note_id: int) -> bool:
        """
        Delete a note. A note that is already gone counts as deleted.
        """
        if not self._begin("delete"):
            return False
        try:
            result = await self.store.delete(note_id)
        finally:
            self._end("delete")

        if isinstance(result, Err) and not isinstance(result.error, NotFoundError):
            self._alert_error(result.error)
            return False

        if self.state.form.edit_target_id == note_id:
            self.state.form = FormState()
        await self.refresh()
        return True

    # ── Summary dialog ────────────────────────────────────────────────────

    async def summarize(self, note: Note) -> None:
        """
        Open the dialog for `note` and request its summary.

        The response is applied only if the dialog is still waiting on this
        exact request; otherwise it is dropped.
        """
        self.state.dialog = self.state.dialog.request_started(note.id)
        token = self.state.dialog.request_token
        logger.info("Summarize requested for note %s (token %d)", note.id, token)

        result = await self.gateway.summarize(note.content)

        if not self.state.dialog.accepts(token, note.id):
            logger.info("Discarding stale summary response for note %s (token %d)", note.id, token)
            return

        if isinstance(result, Err):
            logger.warning("Summarize failed for note %s: %s", note.id, result.error.context)
            self.state.dialog = self.state.dialog.failed(SUMMARY_FAILED)
        else:
            self.state.dialog = self.state.dialog.succeeded(result.value)

    async def save_summary(self, summary: Optional[str] = None) -> bool:
        """
        Persist the displayed summary (or an edited `summary`) onto the
        dialog's target note.

        On success the dialog closes and the list is refreshed. On failure an
        alert is raised, the dialog stays in SUCCEEDED and Save may be retried.
        """
        dialog = self.state.dialog
        if not dialog.can_save:
            logger.error("Save summary with no target (phase %s)", dialog.phase.value)
            self._alert(AlertKind.VALIDATION, NO_NOTE_SELECTED)
            return False

        text = dialog.summary if summary is None else summary
        if not text.strip():
            self._alert(AlertKind.VALIDATION, SUMMARY_EMPTY)
            return False
        if not self._begin("save"):
            return False

        target = dialog.summary_target_id
        try:
            result = await self.store.update(target, {"summary": text})
        finally:
            self._end("save")

        if isinstance(result, Err):
            if isinstance(result.error, NotFoundError):
                self._alert(AlertKind.NOT_FOUND, NOTE_GONE)
                await self.refresh()
            else:
                self._alert(AlertKind.STORE, SAVE_SUMMARY_FAILED)
            return False

        # Close only if the user has not moved on to another dialog meanwhile
        current = self.state.dialog
        if current.phase is SummaryPhase.SUCCEEDED and current.request_token == dialog.request_token:
            self.state.dialog = current.closed()
        await self.refresh()
        return True

    def close_dialog(self) -> None:
        """Close from any phase; an unsaved summary is discarded."""
        self.state.dialog = self.state.dialog.closed()

    @property
    def dialog(self) -> DialogState:
        return self.state.dialog
