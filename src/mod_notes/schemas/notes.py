"""
Note Schemas

Pydantic models for Note API request/response validation.
Separates concerns: NoteCreate (input), NoteUpdate (partial),
NoteRead (single note), NoteResponse (list payloads), VectorSearchHit.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from mod_notes.models import TITLE_MAX_LENGTH


class NoteCreate(BaseModel):
    """
    Request schema for POST /notes.

    Whitespace is trimmed by the service, which also enforces the title length
    on the trimmed value.
    """

    title: str = Field(
        ...,
        min_length=1,
        description=f"The title of the note, at most {TITLE_MAX_LENGTH} characters "
        "once trimmed",
    )
    body: str = Field(
        ...,
        min_length=1,
        description="The content/body of the note",
    )


class NoteUpdate(BaseModel):
    """
    Request schema for PUT /notes/{id}.

    All fields optional to support partial updates.
    """

    title: str | None = Field(
        None,
        min_length=1,
        description=f"Updated title, at most {TITLE_MAX_LENGTH} characters trimmed",
    )
    body: str | None = Field(None, min_length=1, description="Updated content")


class NoteResponse(BaseModel):
    """
    Lightweight note representation for list and search endpoints.

    Excludes the 384-float embedding to keep bulk payloads small.
    """

    id: UUID
    title: str
    body: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)  # Enables ORM model conversion


class NoteRead(NoteResponse):
    """Full Note representation including the embedding, if any."""

    embedding: list[float] | None = Field(
        default=None, description="Vector embedding (optional)"
    )

    @field_validator("embedding", mode="before")
    @classmethod
    def _coerce_vector(cls, value: Any) -> Any:
        # pgvector hands back numpy arrays
        if value is not None and hasattr(value, "tolist"):
            return value.tolist()
        return value


class VectorSearchHit(NoteResponse):
    """Vector search result: a note plus its cosine similarity to the query."""

    similarity: float = Field(description="Cosine similarity score (-1 to 1)")


class NoteDeleted(BaseModel):
    """Response body for a successful DELETE."""

    message: str = "Note deleted successfully"
    deleted: bool = True
