"""
Vector Search Resolver

Ranks embedding-bearing notes by cosine similarity to a synthesized query
embedding. Every call scores the whole embedded subset; there is no ANN
index on this path.
"""

import logging
from typing import NamedTuple

from mod_notes.models import Note
from mod_notes.repositories.notes import NoteStore
from mod_notes.retrieval.embedding import synthesize_embedding
from mod_notes.retrieval.similarity import cosine_similarity

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10
MAX_LIMIT = 50
DEFAULT_THRESHOLD = 0.7


class ScoredNote(NamedTuple):
    """A note paired with its similarity to the query."""

    note: Note
    similarity: float


class VectorSearchResolver:
    """Top-K similarity search over notes that carry an embedding."""

    def __init__(self, store: NoteStore) -> None:
        self._store = store

    async def search(
        self,
        query: str,
        limit: int = DEFAULT_LIMIT,
        threshold: float = DEFAULT_THRESHOLD,
    ) -> list[ScoredNote]:
        """
        Rank notes by similarity to ``query``.

        Args:
            query: Search text, embedded with ``synthesize_embedding``.
            limit: Maximum number of hits.
            threshold: Minimum similarity (inclusive) for a hit.

        Returns:
            Hits sorted by similarity, highest first. Ties keep store order.
            Empty when nothing carries an embedding or clears the threshold.
        """
        query_embedding = synthesize_embedding(query)
        candidates = await self._store.find_embedded()

        scored = [
            ScoredNote(note, cosine_similarity(query_embedding, note.embedding))
            for note in candidates
            if note.embedding is not None
        ]
        hits = [hit for hit in scored if hit.similarity >= threshold]
        hits.sort(key=lambda hit: hit.similarity, reverse=True)

        logger.debug(
            f"Vector search scored {len(scored)} notes, "
            f"{len(hits)} above threshold {threshold}"
        )
        return hits[:limit]
