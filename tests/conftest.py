"""
Pytest Configuration and Fixtures

Shared fixtures for offline tests (in-memory store, service, TestClient)
and for live tests against a running Docker stack.
"""

import os

from dotenv import load_dotenv

# ---------------------------------------------------------------------------
# Test environment defaults: MUST be before any mod_notes imports.
#
# 1. Load .env first so that Docker-matching credentials are available.
# 2. setdefault fills in anything still missing (CI runners, fresh clones
#    without a .env file) so that pydantic Settings validation doesn't crash.
# ---------------------------------------------------------------------------
load_dotenv()  # .env → os.environ (no-op if file is missing)

_test_env = {
    "POSTGRES_USER": "notes",
    "POSTGRES_PASSWORD": "notes_password",
    "POSTGRES_HOST": "localhost",
    "POSTGRES_PORT": "5432",
    "POSTGRES_DB": "notes_db",
}
for _key, _value in _test_env.items():
    os.environ.setdefault(_key, _value)

# ---------------------------------------------------------------------------
# Imports (safe now that env vars are set)
# ---------------------------------------------------------------------------
import re  # noqa: E402
import time  # noqa: E402
import uuid  # noqa: E402
from collections.abc import Generator, Sequence  # noqa: E402
from datetime import datetime, timedelta  # noqa: E402
from typing import Any  # noqa: E402
from unittest.mock import AsyncMock, patch  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from mod_notes.api.v1.notes import get_notes_service  # noqa: E402
from mod_notes.core.rate_limit import rate_limiter  # noqa: E402
from mod_notes.main import app  # noqa: E402
from mod_notes.models import Note  # noqa: E402
from mod_notes.models.base import utcnow  # noqa: E402
from mod_notes.repositories.notes import LIKE_ESCAPE_CHAR, NoteSort  # noqa: E402
from mod_notes.services.notes import NotesService  # noqa: E402

BASE_URL = "http://localhost:8000"


# ---------------------------------------------------------------------------
# In-memory NoteStore
# ---------------------------------------------------------------------------


def like_to_regex(pattern: str) -> re.Pattern[str]:
    """Translate a LIKE pattern (``\\`` escapes) into a case-insensitive regex."""
    parts: list[str] = []
    chars = iter(pattern)
    for char in chars:
        if char == LIKE_ESCAPE_CHAR:
            parts.append(re.escape(next(chars, "")))
        elif char == "%":
            parts.append(".*")
        elif char == "_":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("".join(parts), re.IGNORECASE | re.DOTALL)


class InMemoryNoteStore:
    """
    Dict-backed ``NoteStore`` with PostgreSQL-like ordering semantics.

    Failure injection:
        text_search_error: raised by ``text_search`` only (tier 1).
        fail_with: raised by every operation.
    """

    def __init__(self) -> None:
        self.notes: dict[uuid.UUID, Note] = {}
        self.calls: list[str] = []
        self.text_search_error: Exception | None = None
        self.fail_with: Exception | None = None
        self._clock = datetime.min.replace(tzinfo=utcnow().tzinfo)

    def _enter(self, operation: str) -> None:
        self.calls.append(operation)
        if self.fail_with is not None:
            raise self.fail_with

    def _tick(self) -> datetime:
        # Strictly increasing timestamps, even within one microsecond
        self._clock = max(utcnow(), self._clock + timedelta(microseconds=1))
        return self._clock

    def _newest_first(self, notes: list[Note]) -> list[Note]:
        return sorted(notes, key=lambda n: n.created_at, reverse=True)

    def seed(self, title: str, body: str, embedding: Any = None) -> Note:
        """Insert directly, the way an ingestion process would."""
        now = self._tick()
        note = Note(
            id=uuid.uuid4(),
            title=title,
            body=body,
            embedding=embedding,
            created_at=now,
            updated_at=now,
        )
        self.notes[note.id] = note
        return note

    async def create(self, obj_in: Any) -> Note:
        self._enter("create")
        return self.seed(obj_in["title"], obj_in["body"])

    async def get_by_id(self, id: Any) -> Note | None:
        self._enter("get_by_id")
        return self.notes.get(id)

    async def list_notes(self, limit: int, skip: int, sort: NoteSort) -> list[Note]:
        self._enter("list_notes")
        notes = list(self.notes.values())
        if sort == NoteSort.NEWEST:
            notes.sort(key=lambda n: n.created_at, reverse=True)
        elif sort == NoteSort.OLDEST:
            notes.sort(key=lambda n: n.created_at)
        elif sort == NoteSort.RECENTLY_UPDATED:
            notes.sort(key=lambda n: n.updated_at, reverse=True)
        else:
            notes = self._newest_first(notes)
            notes.sort(key=lambda n: n.title)
        return notes[skip : skip + limit]

    async def update_by_id(self, id: Any, obj_in: Any) -> Note | None:
        self._enter("update_by_id")
        note = self.notes.get(id)
        if note is None:
            return None
        if obj_in:
            for field, value in obj_in.items():
                setattr(note, field, value)
            note.updated_at = self._tick()
        return note

    async def delete_by_id(self, id: Any) -> bool:
        self._enter("delete_by_id")
        return self.notes.pop(id, None) is not None

    async def text_search(self, query: str, limit: int, skip: int) -> list[Note]:
        """Whole-word match ranked by number of matching words."""
        self._enter("text_search")
        if self.text_search_error is not None:
            raise self.text_search_error
        terms = set(re.findall(r"\w+", query.lower()))
        scored = []
        for note in self._newest_first(list(self.notes.values())):
            words = re.findall(r"\w+", note.full_text.lower())
            score = sum(1 for word in words if word in terms)
            if score:
                scored.append((score, note))
        scored.sort(key=lambda item: item[0], reverse=True)
        return [note for _, note in scored][skip : skip + limit]

    async def find_containing(
        self, pattern: str, limit: int, skip: int
    ) -> list[Note]:
        self._enter("find_containing")
        regex = like_to_regex(pattern)
        matches = [
            note
            for note in self._newest_first(list(self.notes.values()))
            if regex.fullmatch(note.title) or regex.fullmatch(note.body)
        ]
        return matches[skip : skip + limit]

    async def find_embedded(self) -> Sequence[Note]:
        self._enter("find_embedded")
        return [note for note in self.notes.values() if note.embedding is not None]


# ---------------------------------------------------------------------------
# Offline fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def store() -> InMemoryNoteStore:
    """Fresh, empty in-memory store."""
    return InMemoryNoteStore()


@pytest.fixture
def service(store: InMemoryNoteStore) -> NotesService:
    """NotesService bound to the in-memory store."""
    return NotesService(store)


@pytest.fixture
def client(store: InMemoryNoteStore) -> Generator[TestClient, None, None]:
    """
    TestClient with the service dependency pointed at the in-memory store.

    TestClient triggers the lifespan handler, so the database wait and
    engine disposal are mocked. The rate limiter starts empty for each test.
    """
    app.dependency_overrides[get_notes_service] = lambda: NotesService(store)
    rate_limiter.reset()
    with (
        patch("mod_notes.core.database.wait_for_db", new_callable=AsyncMock) as mock_db,
        patch("mod_notes.core.database.dispose_engine", new_callable=AsyncMock),
    ):
        mock_db.return_value = True
        with TestClient(app) as test_client:
            yield test_client
    app.dependency_overrides.clear()
    rate_limiter.reset()


# ---------------------------------------------------------------------------
# Live fixtures (Docker stack)
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def wait_for_api():
    """
    Block until the API is ready or timeout expires.

    Polls /health endpoint with 1s intervals for up to 30s.
    Fails the test session if API is unreachable (Docker likely not running).
    """
    url = f"{BASE_URL}/health"
    timeout = 30
    start = time.time()

    print("\n[Test] Waiting for API...")
    while time.time() - start < timeout:
        try:
            res = httpx.get(url, timeout=1.0)
            if res.status_code == 200:
                print("API Ready")
                return
        except httpx.RequestError:
            time.sleep(1)

    pytest.fail("API unreachable. Docker is likely down.")


@pytest.fixture(scope="session")
def api_client(wait_for_api) -> Generator[httpx.Client, None, None]:
    """
    Pre-configured HTTP client for live tests, rooted at /api/v1.

    Yields:
        httpx.Client: Session-scoped client, automatically closed after tests.
    """
    with httpx.Client(base_url=f"{BASE_URL}/api/v1", timeout=10.0) as client:
        yield client


@pytest.fixture
def reference_notes(store: InMemoryNoteStore) -> list[Note]:
    """Four notes seeded oldest first, so the last one is the newest."""
    return [
        store.seed("JavaScript Basics", "Learn about variables and functions"),
        store.seed("React Tutorial", "Building components with JavaScript"),
        store.seed("Node.js Guide", "Server-side development with Node"),
        store.seed("Database Design", "MongoDB and SQL fundamentals"),
    ]
