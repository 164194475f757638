"""
QuillNotes Backend - OpenAI Summary Service
=============================================

What:  Concrete Summarizer using an OpenAI-compatible chat completion API.
Why:   One system + one user message in, one paragraph out; the first
       returned choice is the summary.
How:   AsyncOpenAI client with retries disabled and a per-call timeout.
       Oversized input is cut to `summary_max_input_chars` before sending.
Who:   Singleton used by POST /summarize.

Failure policy:
    Any exception from the SDK (auth, rate limit, network, timeout) or a
    malformed response (no choices, null content) is logged here with its
    cause and re-raised as SummarizationError. The route turns that into
    one generic message; the cause never reaches the caller.
"""

import logging
import time
import uuid
from typing import List, Optional

from openai import AsyncOpenAI

from quillnotes.config import credential_present, settings
from quillnotes.exceptions import SummarizationError, ValidationError
from quillnotes.services.summarizer_base import Summarizer

logger = logging.getLogger(__name__)


class OpenAISummaryService(Summarizer):
    """
    Summarizes note content with a small chat model.

    The SDK client is built lazily on first use so that the app imports and
    serves health checks even when no credential is configured.
    """

    SYSTEM_PROMPT = "You are a helpful assistant that summarizes text concisely."
    USER_PROMPT = "Please summarize the following text in a brief paragraph: {content}"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_input_chars: Optional[int] = None,
    ):
        self.api_key = settings.openai_api_key if api_key is None else api_key
        self.model = model or settings.openai_model
        self.base_url = base_url or settings.openai_base_url
        self.timeout = timeout or settings.openai_timeout_seconds
        self.max_input_chars = max_input_chars or settings.summary_max_input_chars
        self._client: Optional[AsyncOpenAI] = None

        logger.info(
            "OpenAISummaryService initialized with model=%s, timeout=%.0fs, credential=%s",
            self.model,
            self.timeout,
            "configured" if self.is_configured() else "missing",
        )

    def is_configured(self) -> bool:
        return credential_present(self.api_key)

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self.is_configured():
                raise SummarizationError(context={"reason": "missing_credential"})
            self._client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout,
                max_retries=0,
            )
        return self._client

    def build_messages(self, content: str) -> List[dict]:
        return [
            {"role": "system", "content": self.SYSTEM_PROMPT},
            {"role": "user", "content": self.USER_PROMPT.format(content=content)},
        ]

    def _cap_input(self, content: str, request_id: str) -> str:
        if len(content) <= self.max_input_chars:
            return content
        logger.warning(
            "[%s] Content truncated from %d to %d chars before summarization",
            request_id,
            len(content),
            self.max_input_chars,
        )
        return content[: self.max_input_chars]

    async def summarize(self, content: str) -> str:
        if not isinstance(content, str) or not content.strip():
            raise ValidationError(message="Content is required", field="content")

        # Correlates the start/finish/failure lines of one upstream call
        request_id = str(uuid.uuid4())[:8]
        start_time = time.time()
        logger.info("[%s] Starting summarization (%d chars)", request_id, len(content))

        try:
            completion = await self.client.chat.completions.create(
                model=self.model,
                messages=self.build_messages(self._cap_input(content, request_id)),
            )
            if not completion.choices:
                raise SummarizationError(context={"reason": "no_choices"})
            summary = completion.choices[0].message.content
            if summary is None:
                raise SummarizationError(context={"reason": "empty_message"})

        except SummarizationError as e:
            logger.error(
                "[%s] Summarization failed: %s", request_id, e.context.get("reason", "unknown")
            )
            raise
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                "[%s] Completion call failed after %.0fms: %s: %s",
                request_id,
                duration_ms,
                type(e).__name__,
                str(e),
                exc_info=True,
            )
            raise SummarizationError(
                context={"request_id": request_id, "error_type": type(e).__name__}
            ) from e

        duration_ms = (time.time() - start_time) * 1000
        logger.info(
            "[%s] Summarization completed in %.0fms, %d chars",
            request_id,
            duration_ms,
            len(summary),
        )
        return summary


summary_service = OpenAISummaryService()
