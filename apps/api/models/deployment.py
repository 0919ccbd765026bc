import uuid
from datetime import datetime

from sqlalchemy import String, Text, Integer, DateTime, ForeignKey, UniqueConstraint, Enum as SAEnum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from enum import Enum

from apps.api.models.base import BaseModel

# Name of the (project_id, version) unique constraint. The deployment service
# looks for it in IntegrityErrors to tell a version race from other failures.
DEPLOYMENT_VERSION_CONSTRAINT = "uq_project_deployments_project_id_version"


class DeploymentStatus(str, Enum):
    PENDING = "PENDING"
    BUILDING = "BUILDING"
    DEPLOYING = "DEPLOYING"
    DEPLOYED = "DEPLOYED"
    ERROR = "ERROR"
    CANCELLED = "CANCELLED"


class ProjectDeployment(BaseModel):
    __tablename__ = "project_deployments"
    __table_args__ = (
        UniqueConstraint("project_id", "version", name=DEPLOYMENT_VERSION_CONSTRAINT),
    )

    version: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(
        SAEnum(DeploymentStatus, name="deployment_status"), default=DeploymentStatus.PENDING, nullable=False
    )

    # Build service
    build_id: Mapped[str] = mapped_column(String(255), nullable=False)
    build_started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Source
    branch: Mapped[str] = mapped_column(String(255), nullable=False)
    commit_hash: Mapped[str] = mapped_column(String(40), nullable=False)
    commit_message: Mapped[str] = mapped_column(Text, nullable=False)
    committer: Mapped[str] = mapped_column(String(255), nullable=False)

    # Generated build files, kept for debugging failed builds
    dockerfile: Mapped[str] = mapped_column(Text, nullable=False)
    docker_ignore: Mapped[str] = mapped_column(Text, nullable=False)

    project_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("repository_projects.id", ondelete="CASCADE"), nullable=False
    )
    environment_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("runtime_environments.id", ondelete="CASCADE"), nullable=False
    )

    # Relationships
    project: Mapped["RepositoryProject"] = relationship(back_populates="deployments")
    environment: Mapped["RuntimeEnvironment"] = relationship()
