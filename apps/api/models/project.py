import uuid

from sqlalchemy import String, Text, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from apps.api.models.base import BaseModel


class RepositoryProject(BaseModel):
    """A GitHub repository that Ferry builds and deploys."""

    __tablename__ = "repository_projects"

    name: Mapped[str] = mapped_column(String(255), nullable=False)  # Repo full name, e.g. "user/repo"
    build_command: Mapped[str] = mapped_column(Text, nullable=False)  # e.g. "npm install && npm run build"
    start_command: Mapped[str] = mapped_column(Text, nullable=False)  # e.g. "node dist/index.js"
    branch: Mapped[str] = mapped_column(String(100), default="main", nullable=False)

    # Owner
    owner_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)

    # GitHub App installation used to read the repository
    authorization_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("github_app_authorizations.id"), nullable=True
    )

    # Relationships
    owner: Mapped["User"] = relationship(back_populates="projects")
    authorization: Mapped["GitHubAppAuthorization | None"] = relationship(back_populates="projects")
    environments: Mapped[list["RuntimeEnvironment"]] = relationship(back_populates="project")
    deployments: Mapped[list["ProjectDeployment"]] = relationship(back_populates="project")
