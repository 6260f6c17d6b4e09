"""
Base Repository

Generic repository pattern implementation for async SQLAlchemy CRUD operations.
Provides type-safe database access with consistent session handling.
"""

from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from sqlalchemy import ColumnElement, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from mod_notes.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Generic repository providing common CRUD operations.

    Each instance is bound to one externally managed session (injected via
    FastAPI dependency), so callers hold a single store handle per request.

    Usage:
        class NoteRepository(BaseRepository[Note]):
            def __init__(self, session: AsyncSession):
                super().__init__(session, Note)
    """

    def __init__(self, session: AsyncSession, model: type[ModelType]):
        self.session = session
        self.model = model

    async def create(self, obj_in: Any) -> ModelType:
        """
        Create a new record.

        Args:
            obj_in: Pydantic schema or dict with entity data.

        Returns:
            The created entity with database-generated fields populated.
        """
        data = obj_in.model_dump() if hasattr(obj_in, "model_dump") else obj_in
        db_obj = self.model(**data)
        self.session.add(db_obj)
        await self.session.commit()
        await self.session.refresh(db_obj)  # Load generated fields (id, timestamps)
        return db_obj

    async def get_by_id(self, id: Any) -> ModelType | None:
        """Get a record by primary key. Returns None if not found."""
        result = await self.session.execute(
            select(self.model).where(self.model.id == id)  # type: ignore[attr-defined]
        )
        return result.scalars().first()

    async def get_all(
        self,
        skip: int = 0,
        limit: int = 100,
        order_by: Sequence[ColumnElement[Any]] = (),
    ) -> Sequence[ModelType]:
        """Get all records with offset-based pagination."""
        stmt = select(self.model).order_by(*order_by).offset(skip).limit(limit)
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def find_where(self, *criteria: ColumnElement[bool]) -> Sequence[ModelType]:
        """Get every record matching all given criteria (no pagination)."""
        result = await self.session.execute(select(self.model).where(*criteria))
        return result.scalars().all()

    async def update(self, db_obj: ModelType, obj_in: Any) -> ModelType:
        """
        Update a record with partial data.

        Args:
            db_obj: Existing entity to update.
            obj_in: Pydantic schema or dict (only provided fields are updated).
        """
        update_data = (
            obj_in.model_dump(exclude_unset=True)  # Partial update support
            if hasattr(obj_in, "model_dump")
            else obj_in
        )
        for field, value in update_data.items():
            setattr(db_obj, field, value)
        await self.session.commit()
        await self.session.refresh(db_obj)
        return db_obj

    async def update_by_id(self, id: Any, obj_in: Any) -> ModelType | None:
        """Load then patch a record. Returns None if no record has this id."""
        db_obj = await self.get_by_id(id)
        if db_obj is None:
            return None
        return await self.update(db_obj, obj_in)

    async def delete_by_id(self, id: Any) -> bool:
        """Hard delete. Returns True iff a record existed and was removed."""
        result = await self.session.execute(
            delete(self.model).where(self.model.id == id)  # type: ignore[attr-defined]
        )
        await self.session.commit()
        return bool(result.rowcount)
