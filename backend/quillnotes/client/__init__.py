"""
QuillNotes Client
===================

Application logic for a QuillNotes front end, independent of any UI toolkit.

    NoteController ──▶ NoteStore      (HttpNoteStore / InMemoryNoteStore)
                   └─▶ SummaryGateway (HttpSummaryGateway)

Example:
    async with create_http_client() as http:
        controller = NoteController(HttpNoteStore(http), HttpSummaryGateway(http))
        await controller.refresh()
"""

from quillnotes.client.controller import NoteController
from quillnotes.client.gateway import HttpSummaryGateway, SummaryGateway
from quillnotes.client.results import Err, Ok, Result
from quillnotes.client.settings import ClientSettings, create_http_client
from quillnotes.client.state import (
    Alert,
    AlertKind,
    AppState,
    DialogState,
    FormState,
    SummaryPhase,
)
from quillnotes.client.stores import HttpNoteStore, InMemoryNoteStore, NoteStore

__all__ = [
    "Alert",
    "AlertKind",
    "AppState",
    "ClientSettings",
    "DialogState",
    "Err",
    "FormState",
    "HttpNoteStore",
    "HttpSummaryGateway",
    "InMemoryNoteStore",
    "NoteController",
    "NoteStore",
    "Ok",
    "Result",
    "SummaryGateway",
    "SummaryPhase",
    "create_http_client",
]
