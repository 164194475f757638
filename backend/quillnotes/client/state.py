"""
QuillNotes Client - Application State
=======================================

What:  The explicit state the NoteController owns: note list, edit form,
       summary dialog and pending alerts.
How:   FormState and DialogState are frozen; every transition returns a new
       value, so a state can be inspected or compared in tests without
       worrying about later mutation.

Summary Dialog State Machine:
    IDLE ──summarize──▶ REQUESTING ──ok────▶ SUCCEEDED ──save ok──▶ IDLE
                            │                    │
                            └──error──▶ FAILED   └──save error──▶ SUCCEEDED
    any ──close──▶ IDLE

    request_token increases with every summarize; a response is applied
    only while the dialog is still REQUESTING with the same token and the
    same target note.

Two targets, tracked independently:
    FormState.edit_target_id       the note loaded in the edit form
    DialogState.summary_target_id  the note a summary will be saved onto
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional

from quillnotes.schemas.note import NoteResponse as Note


class SummaryPhase(str, Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class AlertKind(str, Enum):
    VALIDATION = "validation"
    STORE = "store"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class Alert:
    kind: AlertKind
    message: str


@dataclass(frozen=True)
class FormState:
    title: str = ""
    content: str = ""
    edit_target_id: Optional[int] = None

    @property
    def is_editing(self) -> bool:
        return self.edit_target_id is not None


@dataclass(frozen=True)
class DialogState:
    is_open: bool = False
    summary: str = ""
    error: str = ""
    is_loading: bool = False
    phase: SummaryPhase = SummaryPhase.IDLE
    summary_target_id: Optional[int] = None
    request_token: int = 0

    def request_started(self, note_id: int) -> "DialogState":
        return DialogState(
            is_open=True,
            is_loading=True,
            phase=SummaryPhase.REQUESTING,
            summary_target_id=note_id,
            request_token=self.request_token + 1,
        )

    def accepts(self, token: int, note_id: int) -> bool:
        """Whether a response for (token, note_id) may still be applied."""
        return (
            self.phase is SummaryPhase.REQUESTING
            and self.request_token == token
            and self.summary_target_id == note_id
        )

    def succeeded(self, summary: str) -> "DialogState":
        return replace(
            self,
            summary=summary,
            error="",
            is_loading=False,
            phase=SummaryPhase.SUCCEEDED,
        )

    def failed(self, message: str) -> "DialogState":
        # Target cleared so a stray Save cannot land on any note
        return replace(
            self,
            summary="",
            error=message,
            is_loading=False,
            phase=SummaryPhase.FAILED,
            summary_target_id=None,
        )

    def closed(self) -> "DialogState":
        return DialogState(request_token=self.request_token)

    @property
    def can_save(self) -> bool:
        return self.phase is SummaryPhase.SUCCEEDED and self.summary_target_id is not None


@dataclass
class AppState:
    notes: List[Note] = field(default_factory=list)
    form: FormState = field(default_factory=FormState)
    dialog: DialogState = field(default_factory=DialogState)
    alerts: List[Alert] = field(default_factory=list)

    def find_note(self, note_id: int) -> Optional[Note]:
        return next((n for n in self.notes if n.id == note_id), None)
