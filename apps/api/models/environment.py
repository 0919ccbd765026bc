import uuid

from sqlalchemy import String, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from apps.api.models.base import BaseModel


class RuntimeEnvironment(BaseModel):
    """A place a project can be deployed to (staging, production, ...)."""

    __tablename__ = "runtime_environments"
    __table_args__ = (
        UniqueConstraint("project_id", "slug", name="uq_runtime_environments_project_id_slug"),
    )

    slug: Mapped[str] = mapped_column(String(50), nullable=False)

    project_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("repository_projects.id", ondelete="CASCADE"), nullable=False
    )

    project: Mapped["RepositoryProject"] = relationship(back_populates="environments")
