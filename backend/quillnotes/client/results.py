"""
Explicit success/failure values returned by the client-side stores and gateway.

The controller branches on `is_ok` instead of wrapping every network call in
try/except, and every failure arrives as one of the QuillNotesError classes.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from quillnotes.exceptions import QuillNotesError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    error: QuillNotesError

    @property
    def is_ok(self) -> bool:
        return False


Result = Union[Ok[T], Err]
