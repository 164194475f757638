"""
QuillNotes - Exception Hierarchy
==================================

What:  Application-specific exceptions for the failure classes a note action
       can hit.
Why:   Each class maps to one user-visible outcome; global handlers (main.py)
       turn them into structured JSON with the right status code, and the
       client package carries the same classes inside `Err` results.
How:   Each exception carries a safe `message` and a `context` dict that is
       logged but never returned to the caller.

Exception Hierarchy:
    QuillNotesError (base)
    ├── ValidationError     → 400 Bad Request (caller input violates a precondition)
    ├── NotFoundError       → 404 Not Found (soft failure: refresh, do not crash)
    ├── StoreError          → 500 Internal Server Error (persistence failed)
    └── SummarizationError  → 500 Internal Server Error (completion service failed)

None of these is fatal to the process. Every failure is scoped to a single
user action and recoverable by repeating that action.
"""

from typing import Any, Dict, Optional


class QuillNotesError(Exception):
    """
    Base exception for all QuillNotes errors.

    Attributes:
        message:  User-facing error description (safe to return in a response)
        context:  Additional debug info (logged, NOT returned to the client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(QuillNotesError):
    """
    Raised when caller input fails a precondition.

    When:    Blank title or content, blank summary, empty update, empty
             summarize body.
    HTTP:    400 Bad Request
    Retry:   Never automatic; the user fixes the input.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(QuillNotesError):
    """
    Raised when an update/delete/get target no longer exists.

    SQLAlchemy returns None for missing rows; the service layer converts
    that into this exception so routes can answer 404 and the controller can
    treat it as a soft failure.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id is not None:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource_id = resource_id


class StoreError(QuillNotesError):
    """
    Raised when the persistence backend is unreachable or rejects an operation.

    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic. SQL text,
        constraint names and driver errors go to the server log only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class SummarizationError(QuillNotesError):
    """
    Raised for any failure contacting or parsing the completion service.

    Auth failures, rate limits, network errors, timeouts and malformed
    responses all collapse into this one type. Callers cannot tell transient
    from permanent failures and must treat every one identically.
    """

    def __init__(
        self,
        message: str = "Failed to generate summary",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
