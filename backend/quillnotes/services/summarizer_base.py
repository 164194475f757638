"""
QuillNotes Backend - Abstract Summarizer Interface
====================================================

What:  Abstract base class for services that turn note text into a summary.
Why:   The route depends on this contract, not on a provider SDK, so tests
       can substitute a scripted summarizer and providers can be swapped.
How:   Concrete implementations inherit from Summarizer and implement
       summarize() and is_configured().
"""

from abc import ABC, abstractmethod


class Summarizer(ABC):
    """
    Contract:
        - summarize() accepts raw note content and returns one plain-text summary
        - blank content raises ValidationError before any external call
        - every provider failure is wrapped in SummarizationError
        - no retries: one call per user action
    """

    @abstractmethod
    async def summarize(self, content: str) -> str:
        """
        Summarize note content in one paragraph.

        Returns:
            The provider's text, verbatim.

        Raises:
            ValidationError: content missing or blank
            SummarizationError: anything went wrong upstream
        """
        ...

    @abstractmethod
    def is_configured(self) -> bool:
        """Whether a credential is present. Must not reveal the credential."""
        ...
