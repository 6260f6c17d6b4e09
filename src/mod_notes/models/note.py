"""
Note Model

Core entity for storing notes with optional vector embeddings.
Uses the pgvector extension for the embedding column.
"""

import uuid

from pgvector.sqlalchemy import Vector
from sqlalchemy import String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from mod_notes.models.base import Base, TimestampMixin

EMBEDDING_DIMENSION = 384
TITLE_MAX_LENGTH = 200


class Note(Base, TimestampMixin):
    """
    Note entity with vector embedding support.

    Attributes:
        id: UUID primary key (generated Python-side).
        title: Trimmed note title (max 200 chars).
        body: Trimmed note content, no length limit.
        embedding: 384-dim unit vector, NULL unless seeded by ingestion.
    """

    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    # Never written by the API create/update path
    embedding: Mapped[list[float] | None] = mapped_column(
        Vector(EMBEDDING_DIMENSION), nullable=True
    )

    @property
    def full_text(self) -> str:
        """Title and body joined, the text an ingestion process embeds."""
        return f"{self.title} {self.body}"

    def __repr__(self) -> str:
        return f"<Note(id={self.id!s:.8}, title='{self.title[:20]}...')>"
