"""Repository project operations, including deployment version allocation."""

import uuid

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from apps.api.models.deployment import ProjectDeployment
from apps.api.models.project import RepositoryProject
from apps.api.repositories.base import BaseRepository


class ProjectRepository(BaseRepository[RepositoryProject]):
    def __init__(self):
        super().__init__(RepositoryProject)

    async def get_with_authorization(
        self, db: AsyncSession, project_id: uuid.UUID
    ) -> RepositoryProject | None:
        """Get a project with its GitHub App authorization eagerly loaded."""
        result = await db.execute(
            select(RepositoryProject)
            .where(RepositoryProject.id == project_id)
            .options(selectinload(RepositoryProject.authorization))
        )
        return result.scalar_one_or_none()

    async def get_next_deployment_version(self, db: AsyncSession, project_id: uuid.UUID) -> int:
        """Next deployment version for a project: highest existing version + 1.

        Two concurrent callers can get the same number. The unique
        (project_id, version) constraint rejects the second insert and the
        deployment service retries with a fresh value.
        """
        result = await db.execute(
            select(func.coalesce(func.max(ProjectDeployment.version), 0))
            .where(ProjectDeployment.project_id == project_id)
        )
        return result.scalar_one() + 1


# Singleton instance
project_repo = ProjectRepository()
