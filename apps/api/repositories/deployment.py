"""Project deployment repository."""

import uuid

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from apps.api.models.deployment import ProjectDeployment
from apps.api.repositories.base import BaseRepository


class DeploymentRepository(BaseRepository[ProjectDeployment]):
    def __init__(self):
        super().__init__(ProjectDeployment)

    async def list_by_project(
        self, db: AsyncSession, project_id: uuid.UUID, skip: int = 0, limit: int = 20
    ) -> list[ProjectDeployment]:
        """Deployments of a project, newest version first."""
        result = await db.execute(
            select(ProjectDeployment)
            .where(ProjectDeployment.project_id == project_id)
            .order_by(ProjectDeployment.version.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def count_by_project(self, db: AsyncSession, project_id: uuid.UUID) -> int:
        result = await db.execute(
            select(func.count()).select_from(ProjectDeployment).where(ProjectDeployment.project_id == project_id)
        )
        return result.scalar_one()


deployment_repo = DeploymentRepository()
