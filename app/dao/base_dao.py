from typing import Any, Generic, TypeVar, Type, Optional
from sqlmodel import SQLModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from app.core.exceptions import StoreError
import structlog

logger = structlog.get_logger()

ModelType = TypeVar("ModelType", bound=SQLModel)


class BaseDAO(Generic[ModelType]):
    def __init__(self, model: Type[ModelType], session_maker: async_sessionmaker):
        self.model = model
        self.session_maker = session_maker

    async def get_by_id(self, db: AsyncSession, id: Any) -> Optional[ModelType]:
        try:
            return await db.get(self.model, id)
        except SQLAlchemyError as e:
            logger.error(f"Error getting {self.model.__name__} by id", id=str(id), error=str(e))
            raise StoreError(f"Could not load {self.model.__name__}") from e

    async def create(self, db: AsyncSession, *, obj_in: dict) -> ModelType:
        try:
            db_obj = self.model(**obj_in)
            db.add(db_obj)
            await db.commit()
            await db.refresh(db_obj)
            logger.info(f"Created {self.model.__name__}", id=str(db_obj.id))
            return db_obj
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Error creating {self.model.__name__}", error=str(e))
            raise StoreError(f"Could not create {self.model.__name__}") from e

    async def replace(self, db: AsyncSession, *, db_obj: ModelType, obj_in: dict) -> ModelType:
        """Overwrite every given field, including ones set to None."""
        try:
            for field, value in obj_in.items():
                setattr(db_obj, field, value)

            db.add(db_obj)
            await db.commit()
            await db.refresh(db_obj)
            logger.info(f"Updated {self.model.__name__}", id=str(db_obj.id))
            return db_obj
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Error updating {self.model.__name__}", error=str(e))
            raise StoreError(f"Could not update {self.model.__name__}") from e

    async def delete(self, db: AsyncSession, *, db_obj: ModelType) -> ModelType:
        try:
            await db.delete(db_obj)
            await db.commit()
            logger.info(f"Deleted {self.model.__name__}", id=str(db_obj.id))
            return db_obj
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Error deleting {self.model.__name__}", id=str(db_obj.id), error=str(e))
            raise StoreError(f"Could not delete {self.model.__name__}") from e
