"""
Base CRUD operations.

This module contains base CRUD operations that can be inherited by
specific model CRUD classes. Journals in this service are append-only,
so only create and read operations are provided.
"""

from typing import Any, Dict, Generic, Optional, Type, TypeVar, Union

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from vibelytics.core.exceptions import PersistenceError
from vibelytics.database import Base
from vibelytics.utils.logging_config import get_logger

logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)


class CRUDBase(Generic[ModelType, CreateSchemaType]):
    """
    Base CRUD operations class.

    Provides generic operations that can be used by specific model CRUD classes.
    """

    def __init__(self, model: Type[ModelType]):
        """
        Initialize CRUD operations for a specific model.

        Args:
            model: The SQLAlchemy model class
        """
        self.model = model

    async def get(self, db: AsyncSession, id: Any) -> Optional[ModelType]:
        """
        Get a single record by ID.

        Args:
            db: Database session
            id: Record ID

        Returns:
            Model instance or None if not found
        """
        result = await db.execute(select(self.model).where(self.model.id == id))
        return result.scalars().first()

    async def create(
        self,
        db: AsyncSession,
        *,
        obj_in: Union[CreateSchemaType, Dict[str, Any]]
    ) -> ModelType:
        """
        Create a new record.

        Args:
            db: Database session
            obj_in: Input data (schema or dict of column values)

        Returns:
            Created model instance
        """
        if isinstance(obj_in, dict):
            obj_in_data = obj_in
        else:
            obj_in_data = obj_in.model_dump()
        db_obj = self.model(**obj_in_data)
        db.add(db_obj)
        return await self.save(db, db_obj)

    async def save(self, db: AsyncSession, db_obj: ModelType) -> ModelType:
        """
        Commit pending changes and refresh ``db_obj``.

        IntegrityError is re-raised untouched so callers can react to
        unique-constraint races; any other database failure becomes
        PersistenceError.
        """
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise
        except SQLAlchemyError as exc:
            await db.rollback()
            logger.error(f"Failed to save {self.model.__name__}: {exc}")
            raise PersistenceError(
                f"Database error while saving {self.model.__name__}",
                detail=str(exc),
            ) from exc
        await db.refresh(db_obj)
        return db_obj

