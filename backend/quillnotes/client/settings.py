"""
Client-side configuration, read from QUILLNOTES_* environment variables.
"""

from typing import Optional

import httpx
from pydantic import Field
from pydantic_settings import BaseSettings


class ClientSettings(BaseSettings):
    # Base URL of the QuillNotes backend
    api_url: str = Field(default="http://localhost:8000")

    # Applies to every call; a summarize call that exceeds it is a failure
    timeout_seconds: float = Field(default=30.0, gt=0, le=300)

    model_config = {
        "env_prefix": "QUILLNOTES_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


def create_http_client(settings: Optional[ClientSettings] = None) -> httpx.AsyncClient:
    """One AsyncClient shared by HttpNoteStore and HttpSummaryGateway."""
    settings = settings or ClientSettings()
    return httpx.AsyncClient(
        base_url=settings.api_url,
        timeout=httpx.Timeout(settings.timeout_seconds),
        headers={"Accept": "application/json"},
    )
