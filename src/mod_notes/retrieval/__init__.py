"""Retrieval engine: embedding synthesis, similarity, text and vector search."""

from mod_notes.retrieval.embedding import rolling_hash, synthesize_embedding
from mod_notes.retrieval.similarity import cosine_similarity
from mod_notes.retrieval.text_search import TextSearchResolver
from mod_notes.retrieval.vector_search import ScoredNote, VectorSearchResolver

__all__ = [
    "rolling_hash",
    "synthesize_embedding",
    "cosine_similarity",
    "TextSearchResolver",
    "VectorSearchResolver",
    "ScoredNote",
]
