"""Workspace invite repository."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from apps.api.models.workspace import WorkspaceInvite
from apps.api.repositories.base import BaseRepository


class InviteRepository(BaseRepository[WorkspaceInvite]):
    def __init__(self):
        super().__init__(WorkspaceInvite)

    async def get_by_token(self, db: AsyncSession, token: str) -> WorkspaceInvite | None:
        """Find an invite by the token from its link, with its workspace loaded."""
        result = await db.execute(
            select(WorkspaceInvite)
            .where(WorkspaceInvite.token == token)
            .options(selectinload(WorkspaceInvite.workspace))
        )
        return result.scalar_one_or_none()


invite_repo = InviteRepository()
