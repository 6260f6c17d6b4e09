"""
Text Search Resolver

Two-tier lookup of notes by query text:

    1. Indexed full-text search, ranked by relevance.
    2. Case-insensitive substring match on title or body, newest first.

Tier 2 runs whenever tier 1 is unavailable OR finds nothing. Only one tier's
results are ever returned.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from mod_notes.models import Note
from mod_notes.repositories.notes import LIKE_ESCAPE_CHAR, NoteStore

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 50
MAX_LIMIT = 100

_LIKE_SPECIALS = (LIKE_ESCAPE_CHAR, "%", "_")


@dataclass(frozen=True)
class IndexedMatches:
    """Tier 1 ran; ``notes`` may be empty."""

    notes: Sequence[Note]


@dataclass(frozen=True)
class IndexedUnavailable:
    """Tier 1 could not run. ``reason`` is kept for logging only."""

    reason: str


IndexedOutcome = IndexedMatches | IndexedUnavailable


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so every character of ``term`` matches literally."""
    # Escape char first, otherwise the escapes added below get doubled
    for special in _LIKE_SPECIALS:
        term = term.replace(special, LIKE_ESCAPE_CHAR + special)
    return term


def containing_pattern(term: str) -> str:
    """LIKE pattern matching any text that contains ``term``."""
    return f"%{escape_like(term)}%"


def indexed_results(outcome: IndexedOutcome) -> Sequence[Note] | None:
    """Tier 1 notes worth returning, or None when the fallback must run."""
    if isinstance(outcome, IndexedMatches) and outcome.notes:
        return outcome.notes
    return None


class TextSearchResolver:
    """
    Resolves text queries against a ``NoteStore``.

    Usage::

        resolver = TextSearchResolver(store)
        notes = await resolver.search("javascript", limit=10)
    """

    def __init__(self, store: NoteStore) -> None:
        self._store = store

    async def search(
        self,
        query: str,
        limit: int = DEFAULT_LIMIT,
        skip: int = 0,
    ) -> list[Note]:
        """
        Find notes matching ``query``.

        Args:
            query: Non-empty search text (callers validate and trim it).
            limit: Page size.
            skip: Page offset.

        Returns:
            Tier 1 results by relevance, or tier 2 results newest first.

        Raises:
            Exception: Whatever the store raises during tier 2.
        """
        outcome = await self._indexed(query, limit, skip)
        notes = indexed_results(outcome)
        if notes is not None:
            logger.debug(f"Indexed search matched {len(notes)} notes")
            return list(notes)

        if isinstance(outcome, IndexedUnavailable):
            logger.warning(
                f"Text search failed, using substring fallback: {outcome.reason}"
            )

        fallback = await self._store.find_containing(
            containing_pattern(query), limit, skip
        )
        logger.debug(f"Substring fallback matched {len(fallback)} notes")
        return list(fallback)

    async def _indexed(self, query: str, limit: int, skip: int) -> IndexedOutcome:
        try:
            notes = await self._store.text_search(query, limit, skip)
        except Exception as e:
            return IndexedUnavailable(reason=str(e) or type(e).__name__)
        return IndexedMatches(notes=notes)
