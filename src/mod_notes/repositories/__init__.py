"""Repositories package."""

from mod_notes.repositories.base import BaseRepository
from mod_notes.repositories.notes import NoteRepository, NoteSort, NoteStore

__all__ = [
    "BaseRepository",
    "NoteRepository",
    "NoteSort",
    "NoteStore",
]
