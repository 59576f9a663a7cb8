"""
Base repository class with common CRUD operations using async SQLAlchemy.
Provides generic database operations that can be extended by specific repositories.

Write methods take a ``commit`` flag. Services that run several writes as one
unit pass ``commit=False`` (the repository only flushes) and commit or roll
back themselves.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, func
from marketplace.database import Base
from typing import TypeVar, Generic, Optional, List, Dict, Any, Type
import uuid
import logging

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository class providing common CRUD operations.
    Uses async SQLAlchemy for all database operations with proper error handling.
    """

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        """
        Initialize repository with model class and database session.

        Args:
            model: SQLAlchemy model class
            db: Async database session
        """
        self.model = model
        self.db = db

    async def _finish(self, commit: bool, obj: Optional[ModelType] = None) -> None:
        if commit:
            await self.db.commit()
            if obj is not None:
                await self.db.refresh(obj)
        else:
            await self.db.flush()

    async def create(self, obj_in: Dict[str, Any], commit: bool = True) -> ModelType:
        """
        Create a new record in the database.

        Args:
            obj_in: Dictionary of field values for the new record
            commit: Commit immediately, or only flush inside a caller's transaction

        Returns:
            Created model instance
        """
        db_obj = self.model(**obj_in)
        return await self.add(db_obj, commit=commit)

    async def add(self, db_obj: ModelType, commit: bool = True) -> ModelType:
        """Persist an already constructed instance."""
        try:
            self.db.add(db_obj)
            await self._finish(commit, db_obj)
            logger.debug(f"Created {self.model.__name__} with id: {db_obj.id}")
            return db_obj
        except Exception as e:
            if commit:
                await self.db.rollback()
            logger.error(f"Failed to create {self.model.__name__}: {e}")
            raise

    async def get_by_id(self, id: uuid.UUID) -> Optional[ModelType]:
        """
        Get a record by its ID.

        Args:
            id: UUID of the record to retrieve

        Returns:
            Model instance if found, None otherwise
        """
        result = await self.db.execute(select(self.model).where(self.model.id == id))
        obj = result.scalar_one_or_none()

        if not obj:
            logger.debug(f"{self.model.__name__} with id {id} not found")

        return obj

    async def get_by_field(self, field: str, value: Any) -> Optional[ModelType]:
        """
        Get a record by a specific field value.

        Raises:
            ValueError: If the model has no such field
        """
        if not hasattr(self.model, field):
            raise ValueError(f"Field '{field}' does not exist on {self.model.__name__}")

        result = await self.db.execute(
            select(self.model).where(getattr(self.model, field) == value)
        )
        return result.scalar_one_or_none()

    async def get_multi(
        self,
        skip: int = 0,
        limit: int = 100,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None
    ) -> List[ModelType]:
        """
        Get multiple records with optional filtering, pagination, and ordering.

        Args:
            skip: Number of records to skip (for pagination)
            limit: Maximum number of records to return
            filters: Dictionary of field filters
            order_by: Field name to order by (prefix with '-' for descending)

        Returns:
            List of model instances
        """
        query = self._apply_filters(select(self.model), filters)

        if order_by:
            field_name = order_by.lstrip("-")
            if hasattr(self.model, field_name):
                column = getattr(self.model, field_name)
                query = query.order_by(column.desc() if order_by.startswith("-") else column)
        else:
            query = query.order_by(self.model.created_at.desc())

        result = await self.db.execute(query.offset(skip).limit(limit))
        objects = result.scalars().all()

        logger.debug(f"Retrieved {len(objects)} {self.model.__name__} records")
        return list(objects)

    async def update(self, db_obj: ModelType, obj_in: Dict[str, Any], commit: bool = True) -> ModelType:
        """
        Apply field values to a loaded instance.

        Args:
            db_obj: Instance to update
            obj_in: Field values; keys the model lacks are ignored
            commit: Commit immediately, or only flush

        Returns:
            The updated instance
        """
        try:
            for field, value in obj_in.items():
                if hasattr(db_obj, field):
                    setattr(db_obj, field, value)
            await self._finish(commit, db_obj)
            logger.debug(f"Updated {self.model.__name__} with id: {db_obj.id}")
            return db_obj
        except Exception as e:
            if commit:
                await self.db.rollback()
            logger.error(f"Failed to update {self.model.__name__} {db_obj.id}: {e}")
            raise

    async def delete(self, id: uuid.UUID, commit: bool = True) -> bool:
        """
        Delete a record by its ID.

        Returns:
            True if record was deleted, False if not found
        """
        try:
            result = await self.db.execute(delete(self.model).where(self.model.id == id))
            await self._finish(commit)

            deleted = result.rowcount > 0
            if deleted:
                logger.debug(f"Deleted {self.model.__name__} with id: {id}")
            return deleted
        except Exception as e:
            if commit:
                await self.db.rollback()
            logger.error(f"Failed to delete {self.model.__name__} {id}: {e}")
            raise

    async def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        """Count records with optional filtering."""
        query = self._apply_filters(select(func.count(self.model.id)), filters)
        result = await self.db.execute(query)
        return result.scalar() or 0

    async def exists(self, id: uuid.UUID) -> bool:
        result = await self.db.execute(
            select(func.count(self.model.id)).where(self.model.id == id)
        )
        return (result.scalar() or 0) > 0

    def _apply_filters(self, query, filters: Optional[Dict[str, Any]]):
        if filters:
            for field, value in filters.items():
                if hasattr(self.model, field):
                    column = getattr(self.model, field)
                    if isinstance(value, list):
                        query = query.where(column.in_(value))
                    else:
                        query = query.where(column == value)
        return query
