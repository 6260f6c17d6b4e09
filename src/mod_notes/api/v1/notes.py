"""
Notes API Router

REST endpoints for note CRUD, two-tier text search and vector search.
Service errors (validation -> 400, store failure -> 500) are rendered by the
application-level ``NotesError`` handler; not-found is mapped here.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from mod_notes.core.database import get_db
from mod_notes.repositories.notes import NoteRepository, NoteSort
from mod_notes.retrieval import text_search, vector_search
from mod_notes.schemas.notes import (
    NoteCreate,
    NoteDeleted,
    NoteRead,
    NoteResponse,
    NoteUpdate,
    VectorSearchHit,
)
from mod_notes.services.notes import NotesService

router = APIRouter()

NOT_FOUND = {"description": "Note not found"}
BAD_REQUEST = {"description": "Validation error or empty search query"}


def get_notes_service(db: AsyncSession = Depends(get_db)) -> NotesService:
    """FastAPI dependency: a service bound to the request's session."""
    return NotesService(NoteRepository(db))


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Note not found")


@router.post(
    "",
    response_model=NoteRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new note",
    responses={400: BAD_REQUEST},
)
async def create_note(
    note: NoteCreate,
    service: NotesService = Depends(get_notes_service),
):
    """Create a note. Title and body are trimmed before persistence."""
    return await service.create_note(note.title, note.body)


@router.get("", response_model=list[NoteResponse], summary="Get all notes")
async def read_notes(
    limit: int = Query(text_search.DEFAULT_LIMIT, ge=1, le=text_search.MAX_LIMIT),
    skip: int = Query(0, ge=0),
    sort: NoteSort = Query(NoteSort.NEWEST),
    service: NotesService = Depends(get_notes_service),
):
    """List notes with pagination, newest first by default."""
    return await service.get_all_notes(limit=limit, skip=skip, sort=sort)


@router.get(
    "/search",
    response_model=list[NoteResponse],
    summary="Search notes",
    responses={400: BAD_REQUEST},
)
async def search_notes(
    q: str = Query(..., description="Search query"),
    limit: int = Query(text_search.DEFAULT_LIMIT, ge=1, le=text_search.MAX_LIMIT),
    skip: int = Query(0, ge=0),
    service: NotesService = Depends(get_notes_service),
):
    """
    Search title and body.

    Uses PostgreSQL full-text search ranked by relevance; when that fails or
    matches nothing, falls back to a case-insensitive substring match
    ordered by creation date.
    """
    return await service.search_notes(q, limit=limit, skip=skip)


@router.get(
    "/vector-search",
    response_model=list[VectorSearchHit],
    summary="Vector search notes",
    responses={400: BAD_REQUEST},
)
async def vector_search_notes(
    q: str = Query(..., description="Search query for semantic similarity"),
    limit: int = Query(vector_search.DEFAULT_LIMIT, ge=1, le=vector_search.MAX_LIMIT),
    threshold: float = Query(
        vector_search.DEFAULT_THRESHOLD,
        ge=0.0,
        le=1.0,
        description="Minimum similarity threshold (0-1)",
    ),
    service: NotesService = Depends(get_notes_service),
):
    """
    Rank embedded notes by cosine similarity to the query.

    Only notes seeded with an embedding take part; the result is empty when
    there are none or none clears the threshold.
    """
    hits = await service.vector_search(q, limit=limit, threshold=threshold)
    return [
        VectorSearchHit(
            **NoteResponse.model_validate(hit.note).model_dump(),
            similarity=hit.similarity,
        )
        for hit in hits
    ]


@router.get(
    "/{note_id}",
    response_model=NoteRead,
    summary="Get note by ID",
    responses={404: NOT_FOUND},
)
async def read_note(note_id: str, service: NotesService = Depends(get_notes_service)):
    """Retrieve a single note by ID. Malformed IDs are reported as not found."""
    note = await service.get_note_by_id(note_id)
    if note is None:
        raise _not_found()
    return note


@router.put(
    "/{note_id}",
    response_model=NoteRead,
    summary="Update note",
    responses={400: BAD_REQUEST, 404: NOT_FOUND},
)
async def update_note(
    note_id: str,
    note_in: NoteUpdate,
    service: NotesService = Depends(get_notes_service),
):
    """Partially update title and/or body."""
    note = await service.update_note(note_id, note_in.model_dump(exclude_unset=True))
    if note is None:
        raise _not_found()
    return note


@router.delete(
    "/{note_id}",
    response_model=NoteDeleted,
    summary="Delete note",
    responses={404: NOT_FOUND},
)
async def delete_note(note_id: str, service: NotesService = Depends(get_notes_service)):
    """Permanently delete a note."""
    if not await service.delete_note(note_id):
        raise _not_found()
    return NoteDeleted()
