"""
QuillNotes Backend - Settings and Logging Helpers
===================================================
"""

import logging

import pytest
from pydantic import ValidationError as SettingsValidationError

from quillnotes.client.settings import ClientSettings
from quillnotes.config import Settings, credential_present
from quillnotes.middleware.logging import level_for_status
from quillnotes.services.summary_service import OpenAISummaryService


class TestSettings:

    def test_log_level_is_normalized(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level_rejected(self):
        with pytest.raises(SettingsValidationError):
            Settings(log_level="chatty")

    def test_missing_key_fails_production_check(self):
        settings = Settings(openai_api_key="")

        assert settings.summarizer_configured is False
        with pytest.raises(ValueError, match="OPENAI_API_KEY"):
            settings.validate_required_for_production()

    @pytest.mark.parametrize(
        "key,expected",
        [
            ("sk-real", True),
            ("", False),
            ("   ", False),
            (None, False),
            ("your_openai_api_key_here", False),
        ],
    )
    def test_startup_check_and_service_agree(self, key, expected):
        assert credential_present(key) is expected
        if key is not None:
            assert Settings(openai_api_key=key).summarizer_configured is expected
        assert OpenAISummaryService(api_key=key or "").is_configured() is expected

    def test_cors_origins_split(self):
        settings = Settings(cors_origins="http://a.test, http://b.test")
        assert settings.cors_origins_list == ["http://a.test", "http://b.test"]

    def test_sqlite_detection(self):
        assert Settings(database_url="sqlite+aiosqlite:///x.db").is_sqlite
        assert not Settings(database_url="postgresql+asyncpg://h/db").is_sqlite

    def test_client_settings_from_env(self, monkeypatch):
        monkeypatch.setenv("QUILLNOTES_API_URL", "http://notes.internal:9000")
        assert ClientSettings().api_url == "http://notes.internal:9000"


@pytest.mark.parametrize(
    "status,level",
    [(200, logging.INFO), (204, logging.INFO), (404, logging.WARNING), (500, logging.ERROR)],
)
def test_access_log_level(status, level):
    assert level_for_status(status) == level
