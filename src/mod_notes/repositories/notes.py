"""
Note Repository

Data access layer for Note entities with full-text and vector lookups.
Extends BaseRepository with PostgreSQL-specific query methods.
"""

import logging
import uuid
from collections.abc import Sequence
from enum import StrEnum
from typing import Any, Protocol

from sqlalchemy import Select, String, func, literal_column, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from mod_notes.core.config import settings
from mod_notes.models import Note
from mod_notes.repositories.base import BaseRepository

logger = logging.getLogger(__name__)

LIKE_ESCAPE_CHAR = "\\"


class NoteSort(StrEnum):
    """Supported orderings for listing notes."""

    NEWEST = "newest"
    OLDEST = "oldest"
    RECENTLY_UPDATED = "updated"
    TITLE = "title"


NOTE_ORDERINGS = {
    NoteSort.NEWEST: (Note.created_at.desc(),),
    NoteSort.OLDEST: (Note.created_at.asc(),),
    NoteSort.RECENTLY_UPDATED: (Note.updated_at.desc(),),
    NoteSort.TITLE: (Note.title.asc(), Note.created_at.desc()),
}


class NoteStore(Protocol):
    """
    Operations the notes engine needs from its persistence collaborator.

    ``NoteRepository`` implements this over PostgreSQL; tests substitute an
    in-memory implementation.
    """

    async def create(self, obj_in: Any) -> Note: ...

    async def get_by_id(self, id: Any) -> Note | None: ...

    async def list_notes(
        self, limit: int, skip: int, sort: NoteSort
    ) -> Sequence[Note]: ...

    async def update_by_id(self, id: Any, obj_in: Any) -> Note | None: ...

    async def delete_by_id(self, id: Any) -> bool: ...

    async def text_search(
        self, query: str, limit: int, skip: int
    ) -> Sequence[Note]: ...

    async def find_containing(
        self, pattern: str, limit: int, skip: int
    ) -> Sequence[Note]: ...

    async def find_embedded(self) -> Sequence[Note]: ...


def _search_document(config: str) -> Any:
    # Must render exactly as the ix_notes_fts GIN index expression; the
    # separator is a SQL constant, a bound parameter would not match it
    return func.to_tsvector(
        literal_column(f"'{config}'::regconfig"),
        Note.title + literal_column("' '", String) + Note.body,
    )


def build_text_search_statement(
    query: str,
    limit: int,
    skip: int,
    config: str = settings.TEXT_SEARCH_CONFIG,
) -> Select[tuple[Note]]:
    """Indexed full-text query over title+body, best ``ts_rank`` first."""
    document = _search_document(config)
    tsquery = func.plainto_tsquery(literal_column(f"'{config}'::regconfig"), query)
    return (
        select(Note)
        .where(document.op("@@")(tsquery))
        .order_by(func.ts_rank(document, tsquery).desc(), Note.created_at.desc())
        .offset(skip)
        .limit(limit)
    )


def build_containing_statement(
    pattern: str,
    limit: int,
    skip: int,
) -> Select[tuple[Note]]:
    """Case-insensitive LIKE match on title OR body, newest first."""
    return (
        select(Note)
        .where(
            or_(
                Note.title.ilike(pattern, escape=LIKE_ESCAPE_CHAR),
                Note.body.ilike(pattern, escape=LIKE_ESCAPE_CHAR),
            )
        )
        .order_by(Note.created_at.desc())
        .offset(skip)
        .limit(limit)
    )


class NoteRepository(BaseRepository[Note]):
    """
    PostgreSQL-backed ``NoteStore``.

    Inherits standard CRUD from BaseRepository and adds:
        - text_search: tsvector/tsquery search ranked by relevance
        - find_containing: ILIKE pattern match used as the search fallback
        - find_embedded: notes that carry an embedding
        - update_embedding: targeted embedding writes for ingestion scripts
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Note)

    async def list_notes(
        self,
        limit: int = 50,
        skip: int = 0,
        sort: NoteSort = NoteSort.NEWEST,
    ) -> Sequence[Note]:
        """Paginated listing in one of the supported orders."""
        return await self.get_all(skip, limit, order_by=NOTE_ORDERINGS[sort])

    async def text_search(self, query: str, limit: int, skip: int) -> Sequence[Note]:
        """
        Full-text search against the GIN index.

        Runs inside a SAVEPOINT: a failed statement aborts the enclosing
        PostgreSQL transaction otherwise, and the caller may still issue the
        fallback query on this same session.

        Raises:
            SQLAlchemyError: If the query fails (missing index, bad config...).
        """
        stmt = build_text_search_statement(query, limit, skip)
        async with self.session.begin_nested():
            result = await self.session.execute(stmt)
            return result.scalars().all()

    async def find_containing(
        self, pattern: str, limit: int, skip: int
    ) -> Sequence[Note]:
        """
        Notes whose title or body matches an already-escaped LIKE pattern.

        Args:
            pattern: LIKE pattern using ``\\`` as escape character.
        """
        result = await self.session.execute(
            build_containing_statement(pattern, limit, skip)
        )
        return result.scalars().all()

    async def find_embedded(self) -> Sequence[Note]:
        """Every note whose embedding column is populated."""
        return await self.find_where(Note.embedding.isnot(None))

    async def update_embedding(
        self,
        note_id: uuid.UUID,
        embedding: list[float],
    ) -> None:
        """
        Update only the embedding field of a note.

        Bulk UPDATE, no SELECT required. ``updated_at`` is left untouched:
        seeding an embedding is not a content mutation.
        """
        stmt = (
            update(Note)
            .where(Note.id == note_id)
            # Explicit value suppresses the column's onupdate hook
            .values(embedding=embedding, updated_at=Note.updated_at)
        )
        await self.session.execute(stmt)
        await self.session.commit()
        logger.debug(f"Embedding stored for note {note_id}")
