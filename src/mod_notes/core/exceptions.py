"""Exception classes raised by the notes engine."""

from fastapi import HTTPException, status


class NotesError(Exception):
    """Base exception for the notes engine."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)

    def to_http_exception(self) -> HTTPException:
        """Convert to FastAPI HTTPException."""
        return HTTPException(status_code=self.status_code, detail=self.detail)


class NoteValidationError(NotesError):
    """Raised when caller input is missing, empty, or out of range."""

    status_code = status.HTTP_400_BAD_REQUEST


class NoteStoreError(NotesError):
    """
    Raised when the underlying store fails outside the search fallback path.

    The message carries the failed operation, e.g.
    ``"Failed to create note: <cause>"``.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
