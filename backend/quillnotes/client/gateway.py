"""
QuillNotes Client - Summarization Gateway Client
==================================================

What:  Calls POST /summarize and returns Ok(summary) or Err(...).
Why:   The controller needs one failure shape regardless of cause; the
       gateway body deliberately hides the cause anyway.

Mapping:
    200 {"summary": str}  → Ok(summary)
    400                   → Err(ValidationError("Content is required"))
    anything else         → Err(SummarizationError)
    timeout / transport   → Err(SummarizationError)
"""

import logging
from abc import ABC, abstractmethod

import httpx

from quillnotes.client.results import Err, Ok, Result
from quillnotes.exceptions import SummarizationError, ValidationError

logger = logging.getLogger(__name__)


class SummaryGateway(ABC):
    @abstractmethod
    async def summarize(self, content: str) -> Result[str]:
        ...


class HttpSummaryGateway(SummaryGateway):
    def __init__(self, http: httpx.AsyncClient, path: str = "/summarize"):
        self.http = http
        self.path = path

    async def summarize(self, content: str) -> Result[str]:
        try:
            response = await self.http.post(self.path, json={"content": content})
        except httpx.TimeoutException:
            logger.warning("Summarize request timed out")
            return Err(SummarizationError(context={"reason": "timeout"}))
        except httpx.HTTPError as e:
            logger.error("Summarize request failed: %s: %s", type(e).__name__, str(e))
            return Err(SummarizationError(context={"error_type": type(e).__name__}))

        if response.status_code == 400:
            return Err(ValidationError(message="Content is required", field="content"))
        if not response.is_success:
            logger.warning("Summarize returned %d", response.status_code)
            return Err(SummarizationError(context={"status": response.status_code}))

        try:
            summary = response.json()["summary"]
        except (ValueError, KeyError, TypeError):
            return Err(SummarizationError(context={"reason": "malformed_response"}))
        if not isinstance(summary, str):
            return Err(SummarizationError(context={"reason": "malformed_response"}))
        return Ok(summary)
