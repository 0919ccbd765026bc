"""Base repository with the generic operations every model shares."""

import uuid
from typing import Generic, TypeVar, Type

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from apps.api.models.base import BaseModel

ModelType = TypeVar("ModelType", bound=BaseModel)


class BaseRepository(Generic[ModelType]):
    """Generic repository for any model.

    Usage:
        class UserRepository(BaseRepository[User]):
            def __init__(self):
                super().__init__(User)

        user = await user_repo.get_by_id(db, some_uuid)
    """

    def __init__(self, model: Type[ModelType]):
        self.model = model

    async def get_by_id(self, db: AsyncSession, id: uuid.UUID) -> ModelType | None:
        """Get a single record by its UUID. Returns None if not found."""
        result = await db.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def create(self, db: AsyncSession, **kwargs) -> ModelType:
        """Insert a new record and commit.

        Constraint violations surface from the commit as IntegrityError;
        the caller owns rolling the session back.
        """
        instance = self.model(**kwargs)
        db.add(instance)
        await db.commit()
        await db.refresh(instance)  # Reload server defaults (created_at, ...)
        return instance
