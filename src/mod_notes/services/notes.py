"""
Notes Service

Single entry point for the API layer. Composes note CRUD on the injected
store with the text and vector search resolvers, validates caller input,
and wraps store failures with the operation that failed.
"""

import logging
import uuid
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from mod_notes.core.exceptions import NotesError, NoteStoreError, NoteValidationError
from mod_notes.models import TITLE_MAX_LENGTH, Note
from mod_notes.repositories.notes import NoteSort, NoteStore
from mod_notes.retrieval.text_search import DEFAULT_LIMIT as TEXT_DEFAULT_LIMIT
from mod_notes.retrieval.text_search import MAX_LIMIT as TEXT_MAX_LIMIT
from mod_notes.retrieval.text_search import TextSearchResolver
from mod_notes.retrieval.vector_search import DEFAULT_LIMIT as VECTOR_DEFAULT_LIMIT
from mod_notes.retrieval.vector_search import DEFAULT_THRESHOLD
from mod_notes.retrieval.vector_search import MAX_LIMIT as VECTOR_MAX_LIMIT
from mod_notes.retrieval.vector_search import ScoredNote, VectorSearchResolver

logger = logging.getLogger(__name__)

PATCHABLE_FIELDS = ("title", "body")


def parse_note_id(raw: Any) -> uuid.UUID | None:
    """UUID for ``raw``, or None when it is not a well-formed note id."""
    if isinstance(raw, uuid.UUID):
        return raw
    try:
        return uuid.UUID(str(raw))
    except ValueError:
        return None


def _clean_text(field: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise NoteValidationError(f"{field.capitalize()} must be a non-empty string")
    cleaned = value.strip()
    if field == "title" and len(cleaned) > TITLE_MAX_LENGTH:
        raise NoteValidationError(
            f"Title must be at most {TITLE_MAX_LENGTH} characters"
        )
    return cleaned


def _clean_query(query: str | None) -> str:
    if query is None or not query.strip():
        raise NoteValidationError("Search query is required")
    return query.strip()


def _check_range(
    name: str, value: float, low: float, high: float | None = None
) -> None:
    if value < low or (high is not None and value > high):
        bounds = f"between {low} and {high}" if high is not None else f">= {low}"
        raise NoteValidationError(f"{name} must be {bounds}, got {value}")


def _parse_sort(sort: NoteSort | str) -> NoteSort:
    try:
        return NoteSort(sort)
    except ValueError:
        choices = ", ".join(s.value for s in NoteSort)
        raise NoteValidationError(f"sort must be one of: {choices}") from None


@contextmanager
def _store_errors(action: str) -> Iterator[None]:
    """Re-raise collaborator failures as ``NoteStoreError`` with context."""
    try:
        yield
    except NotesError:
        raise
    except Exception as e:
        # Logged once, by the API error handler
        raise NoteStoreError(f"Failed to {action}: {e}") from e


class NotesService:
    """
    Retrieval facade over a ``NoteStore``.

    Not-found is reported as ``None``/``False`` (malformed ids included),
    bad input as ``NoteValidationError``, and store failures as
    ``NoteStoreError``.

    Usage::

        service = NotesService(NoteRepository(session))
        note = await service.create_note("React Tutorial", "Building components")
        hits = await service.search_notes("components")
    """

    def __init__(self, store: NoteStore) -> None:
        self._store = store
        self._text_search = TextSearchResolver(store)
        self._vector_search = VectorSearchResolver(store)

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    async def create_note(self, title: str | None, body: str | None) -> Note:
        if not title or not body:
            raise NoteValidationError("Title and body are required")
        fields = {
            "title": _clean_text("title", title),
            "body": _clean_text("body", body),
        }

        with _store_errors("create note"):
            note = await self._store.create(fields)
        logger.info(f"Created note {note.id}")
        return note

    async def get_all_notes(
        self,
        limit: int = TEXT_DEFAULT_LIMIT,
        skip: int = 0,
        sort: NoteSort = NoteSort.NEWEST,
    ) -> list[Note]:
        _check_range("limit", limit, 1, TEXT_MAX_LIMIT)
        _check_range("skip", skip, 0)
        order = _parse_sort(sort)

        with _store_errors("retrieve notes"):
            return list(await self._store.list_notes(limit, skip, order))

    async def get_note_by_id(self, note_id: Any) -> Note | None:
        parsed = parse_note_id(note_id)
        if parsed is None:
            return None

        with _store_errors("retrieve note"):
            return await self._store.get_by_id(parsed)

    async def update_note(
        self, note_id: Any, update_data: Mapping[str, Any]
    ) -> Note | None:
        """
        Patch ``title`` and/or ``body``. Other keys are ignored.

        Provided values are trimmed and validated like on create. Returns
        None when the note does not exist.
        """
        parsed = parse_note_id(note_id)
        if parsed is None:
            return None

        fields = {
            field: _clean_text(field, update_data[field])
            for field in PATCHABLE_FIELDS
            if update_data.get(field) is not None
        }

        with _store_errors("update note"):
            note = await self._store.update_by_id(parsed, fields)
        if note is not None:
            changed = ", ".join(fields) or "no changes"
            logger.info(f"Updated note {note.id} ({changed})")
        return note

    async def delete_note(self, note_id: Any) -> bool:
        parsed = parse_note_id(note_id)
        if parsed is None:
            return False

        with _store_errors("delete note"):
            deleted = await self._store.delete_by_id(parsed)
        if deleted:
            logger.info(f"Deleted note {parsed}")
        return deleted

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    async def search_notes(
        self,
        query: str | None,
        limit: int = TEXT_DEFAULT_LIMIT,
        skip: int = 0,
    ) -> list[Note]:
        """Two-tier text search; see ``TextSearchResolver``."""
        cleaned = _clean_query(query)
        _check_range("limit", limit, 1, TEXT_MAX_LIMIT)
        _check_range("skip", skip, 0)

        with _store_errors("search notes"):
            return await self._text_search.search(cleaned, limit, skip)

    async def vector_search(
        self,
        query: str | None,
        limit: int = VECTOR_DEFAULT_LIMIT,
        threshold: float = DEFAULT_THRESHOLD,
    ) -> list[ScoredNote]:
        """Similarity search over embedded notes; see ``VectorSearchResolver``."""
        cleaned = _clean_query(query)
        _check_range("limit", limit, 1, VECTOR_MAX_LIMIT)
        _check_range("threshold", threshold, 0.0, 1.0)

        with _store_errors("perform vector search"):
            return await self._vector_search.search(cleaned, limit, threshold)
