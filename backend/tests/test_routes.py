"""
QuillNotes Backend - API Route Tests
======================================

What:  End-to-end HTTP tests through ASGITransport against a SQLite database.
How:   The summary service is patched at the route module; everything else
       is real.

What we test:
    ✅ POST /summarize: 200 / 400 / 500 bodies, no leaked cause
    ✅ Note CRUD status codes and bodies
    ✅ 400 for blank input, 404 for missing ids
    ✅ /health and /health/credentials
    ✅ X-Request-ID propagation
"""

import pytest
from unittest.mock import AsyncMock, patch

from quillnotes.exceptions import SummarizationError, ValidationError


class TestSummarizeRoute:

    @pytest.mark.asyncio
    async def test_success_returns_summary(self, test_client):
        with patch("quillnotes.routes.summarize.summary_service") as mock_service:
            mock_service.summarize = AsyncMock(return_value="A list of dairy items.")

            response = await test_client.post(
                "/summarize", json={"content": "milk, eggs, butter"}
            )

        assert response.status_code == 200
        assert response.json() == {"summary": "A list of dairy items."}
        mock_service.summarize.assert_awaited_once_with("milk, eggs, butter")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{}, {"content": ""}, {"content": None}])
    async def test_missing_content_is_400(self, test_client, body):
        with patch("quillnotes.routes.summarize.summary_service") as mock_service:
            mock_service.summarize = AsyncMock(
                side_effect=ValidationError(message="Content is required")
            )
            response = await test_client.post("/summarize", json=body)

        assert response.status_code == 400
        assert response.json() == {"error": "Content is required"}

    @pytest.mark.asyncio
    async def test_empty_content_never_reaches_completion_api(self, test_client):
        with patch("quillnotes.services.summary_service.AsyncOpenAI") as mock_cls:
            response = await test_client.post("/summarize", json={"content": "   "})

        assert response.status_code == 400
        assert response.json() == {"error": "Content is required"}
        mock_cls.return_value.chat.completions.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_upstream_failure_is_generic_500(self, test_client):
        with patch("quillnotes.routes.summarize.summary_service") as mock_service:
            mock_service.summarize = AsyncMock(
                side_effect=SummarizationError(
                    context={"error_type": "AuthenticationError", "detail": "bad key sk-123"}
                )
            )
            response = await test_client.post("/summarize", json={"content": "text"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to generate summary"}
        assert "sk-123" not in response.text

    @pytest.mark.asyncio
    async def test_unparsable_body_is_generic_500(self, test_client):
        with patch("quillnotes.routes.summarize.summary_service") as mock_service:
            mock_service.summarize = AsyncMock(return_value="unused")
            response = await test_client.post(
                "/summarize",
                content=b"not json",
                headers={"Content-Type": "application/json"},
            )

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to generate summary"}
        mock_service.summarize.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [["milk, eggs"], "milk", 42])
    async def test_non_object_body_is_400(self, test_client, body):
        response = await test_client.post("/summarize", json=body)

        assert response.status_code == 400
        assert response.json() == {"error": "Content is required"}


class TestNoteRoutes:

    @pytest.mark.asyncio
    async def test_overlong_title_is_400(self, test_client):
        response = await test_client.post(
            "/api/notes", json={"title": "t" * 300, "content": "c"}
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["message"] == "Title must be at most 255 characters"
        assert body["details"]["errors"][0]["field"] == "title"
        assert "t" * 300 not in response.text

        listed = await test_client.get("/api/notes")
        assert listed.json()["notes"] == []

    @pytest.mark.asyncio
    async def test_overlong_title_on_patch_is_400(self, test_client):
        note = (await test_client.post("/api/notes", json={"title": "T", "content": "C"})).json()

        response = await test_client.patch(
            f"/api/notes/{note['id']}", json={"title": "t" * 256}
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Title must be at most 255 characters"

    @pytest.mark.asyncio
    async def test_wrong_type_is_400_not_422(self, test_client):
        response = await test_client.post("/api/notes", json={"title": None, "content": "c"})

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"
        assert response.json()["details"]["errors"][0]["field"] == "title"

    @pytest.mark.asyncio
    async def test_create_and_list(self, test_client):
        created = await test_client.post(
            "/api/notes", json={"title": "Groceries", "content": "milk, eggs, butter"}
        )
        assert created.status_code == 201
        note = created.json()
        assert note["title"] == "Groceries"
        assert note["summary"] is None
        assert isinstance(note["id"], int)

        listed = await test_client.get("/api/notes")
        assert listed.status_code == 200
        assert listed.headers["X-Total-Count"] == "1"
        assert listed.json()["notes"][0]["id"] == note["id"]

    @pytest.mark.asyncio
    async def test_list_newest_first(self, test_client):
        ids = []
        for title in ("A", "B", "C"):
            response = await test_client.post("/api/notes", json={"title": title, "content": "x"})
            ids.append(response.json()["id"])

        listed = await test_client.get("/api/notes")

        assert [n["title"] for n in listed.json()["notes"]] == ["C", "B", "A"]
        assert listed.json()["total_count"] == 3

    @pytest.mark.asyncio
    async def test_blank_title_is_400(self, test_client):
        response = await test_client.post("/api/notes", json={"title": "  ", "content": "x"})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["message"] == "Please fill in both title and content"

        listed = await test_client.get("/api/notes")
        assert listed.json()["notes"] == []

    @pytest.mark.asyncio
    async def test_patch_summary(self, test_client):
        note = (await test_client.post("/api/notes", json={"title": "T", "content": "C"})).json()

        response = await test_client.patch(f"/api/notes/{note['id']}", json={"summary": "S"})

        assert response.status_code == 200
        assert response.json()["summary"] == "S"
        fetched = await test_client.get(f"/api/notes/{note['id']}")
        assert fetched.json()["summary"] == "S"

    @pytest.mark.asyncio
    async def test_patch_blank_summary_is_400(self, test_client):
        note = (await test_client.post("/api/notes", json={"title": "T", "content": "C"})).json()

        response = await test_client.patch(f"/api/notes/{note['id']}", json={"summary": "  "})

        assert response.status_code == 400
        assert response.json()["message"] == "Summary cannot be empty"

    @pytest.mark.asyncio
    async def test_patch_missing_note_is_404(self, test_client):
        response = await test_client.patch("/api/notes/424242", json={"summary": "S"})

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_delete_then_delete_again(self, test_client):
        note = (await test_client.post("/api/notes", json={"title": "T", "content": "C"})).json()

        first = await test_client.delete(f"/api/notes/{note['id']}")
        second = await test_client.delete(f"/api/notes/{note['id']}")

        assert first.status_code == 204
        assert second.status_code == 404
        listed = await test_client.get("/api/notes")
        assert listed.json()["notes"] == []

    @pytest.mark.asyncio
    async def test_get_missing_note_is_404(self, test_client):
        response = await test_client.get("/api/notes/99999")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, test_client):
        response = await test_client.get("/api/notes", headers={"X-Request-ID": "abc-123"})
        assert response.headers["X-Request-ID"] == "abc-123"


class TestHealthRoutes:

    @pytest.mark.asyncio
    async def test_health_healthy(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert body["summarizer"] == "configured"

    @pytest.mark.asyncio
    async def test_health_degraded_without_credential(self, test_client):
        with patch("quillnotes.routes.health.summary_service") as mock_service:
            mock_service.is_configured.return_value = False
            response = await test_client.get("/health")

        body = response.json()
        assert body["status"] == "degraded"
        assert body["summarizer"] == "missing"

    @pytest.mark.asyncio
    async def test_credentials_configured(self, test_client):
        response = await test_client.get("/health/credentials")

        assert response.json() == {"success": True, "message": "API key is configured"}
        assert "test-key-not-real" not in response.text

    @pytest.mark.asyncio
    async def test_credentials_missing(self, test_client):
        with patch("quillnotes.routes.health.summary_service") as mock_service:
            mock_service.is_configured.return_value = False
            response = await test_client.get("/health/credentials")

        assert response.json() == {"success": False, "message": "API key is missing"}
