"""
QuillNotes Backend - Test Configuration (conftest.py)
=======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Environment is pointed at a throwaway SQLite file before anything from
       quillnotes is imported, so the engine and settings singletons pick it up.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── database:         creates the schema, drops it afterwards
    ├── db_session:       real AsyncSession on the SQLite test database
    ├── mock_db_session:  AsyncMock session (no database at all)
    ├── test_client:      HTTPX AsyncClient routed into the FastAPI app
    ├── memory_store:     InMemoryNoteStore
    └── scripted_gateway: SummaryGateway whose responses the test releases
"""

import asyncio
import os
import tempfile
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

# Must run before the first quillnotes import
_TEST_DB_DIR = tempfile.mkdtemp(prefix="quillnotes_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DB_DIR}/test.db"
os.environ["OPENAI_API_KEY"] = "test-key-not-real"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from quillnotes.client.gateway import SummaryGateway
from quillnotes.client.results import Err, Ok, Result
from quillnotes.client.stores import InMemoryNoteStore
from quillnotes.database import async_session_factory, create_schema, drop_schema
from quillnotes.exceptions import StoreError


# ══════════════════════════════════════════════════════════════════════════
# Test doubles
# ══════════════════════════════════════════════════════════════════════════


class ScriptedGateway(SummaryGateway):
    """
    Gateway that parks every call until the test releases it.

    Lets a test interleave two summarize calls and decide which response
    arrives first.
    """

    def __init__(self) -> None:
        self.calls: List[str] = []
        self._waiting: List[asyncio.Future] = []

    async def summarize(self, content: str) -> Result[str]:
        future = asyncio.get_running_loop().create_future()
        self.calls.append(content)
        self._waiting.append(future)
        return await future

    def release(self, index: int, result: Result[str]) -> None:
        self._waiting[index].set_result(result)


class StubGateway(SummaryGateway):
    """Answers immediately: `responses[content]` if present, else `default`."""

    def __init__(
        self,
        default: Optional[Result[str]] = None,
        responses: Optional[Dict[str, Result[str]]] = None,
    ) -> None:
        self.default = default or Ok("A short summary.")
        self.responses = responses or {}
        self.calls: List[str] = []

    async def summarize(self, content: str) -> Result[str]:
        self.calls.append(content)
        return self.responses.get(content, self.default)


class FlakyNoteStore(InMemoryNoteStore):
    """InMemoryNoteStore whose next N calls of a given operation fail with StoreError."""

    def __init__(self) -> None:
        super().__init__()
        self.failures: Dict[str, int] = {}

    def fail(self, operation: str, times: int = 1) -> None:
        self.failures[operation] = times

    def _should_fail(self, operation: str) -> bool:
        remaining = self.failures.get(operation, 0)
        if remaining <= 0:
            return False
        self.failures[operation] = remaining - 1
        return True

    async def list(self):
        if self._should_fail("list"):
            return Err(StoreError())
        return await super().list()

    async def create(self, title: str, content: str, owner: Optional[str] = None):
        if self._should_fail("create"):
            return Err(StoreError())
        return await super().create(title, content, owner=owner)

    async def update(self, note_id: int, changes: Dict[str, Any]):
        if self._should_fail("update"):
            return Err(StoreError())
        return await super().update(note_id, changes)

    async def delete(self, note_id: int):
        if self._should_fail("delete"):
            return Err(StoreError())
        return await super().delete(note_id)


# ══════════════════════════════════════════════════════════════════════════
# Database fixtures
# ══════════════════════════════════════════════════════════════════════════


@pytest_asyncio.fixture
async def database():
    await create_schema()
    yield
    await drop_schema()


@pytest_asyncio.fixture
async def db_session(database):
    async with async_session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get_note(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = note
            result = await note_service.get_note(mock_db_session, 1)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# HTTP fixtures
# ══════════════════════════════════════════════════════════════════════════


@pytest_asyncio.fixture
async def test_client(database):
    """
    HTTPX AsyncClient talking to the FastAPI app through ASGITransport.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from quillnotes.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# ══════════════════════════════════════════════════════════════════════════
# Client-side fixtures
# ══════════════════════════════════════════════════════════════════════════


@pytest.fixture
def memory_store():
    return InMemoryNoteStore()


@pytest.fixture
def flaky_store():
    return FlakyNoteStore()


@pytest.fixture
def scripted_gateway():
    return ScriptedGateway()


@pytest.fixture
def stub_gateway():
    return StubGateway()
