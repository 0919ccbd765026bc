"""Runtime environment repository."""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from apps.api.models.environment import RuntimeEnvironment
from apps.api.repositories.base import BaseRepository


class EnvironmentRepository(BaseRepository[RuntimeEnvironment]):
    def __init__(self):
        super().__init__(RuntimeEnvironment)

    async def get_for_project(
        self, db: AsyncSession, project_id: uuid.UUID, environment_id: uuid.UUID
    ) -> RuntimeEnvironment | None:
        """Get an environment only if it belongs to the given project."""
        result = await db.execute(
            select(RuntimeEnvironment).where(
                RuntimeEnvironment.id == environment_id,
                RuntimeEnvironment.project_id == project_id,
            )
        )
        return result.scalar_one_or_none()


environment_repo = EnvironmentRepository()
