import uuid

from sqlalchemy import String, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from apps.api.models.base import BaseModel


class Workspace(BaseModel):
    __tablename__ = "workspaces"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), unique=True, index=True, nullable=False)

    invites: Mapped[list["WorkspaceInvite"]] = relationship(back_populates="workspace")


class WorkspaceInvite(BaseModel):
    """An invitation for an email address to join a workspace.

    The token is the secret part of the invite link (/invites/accept?token=...).
    """

    __tablename__ = "workspace_invites"

    token: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)

    workspace_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False
    )
    inviter_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=True
    )

    workspace: Mapped["Workspace"] = relationship(back_populates="invites")
