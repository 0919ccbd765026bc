from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from apps.api.models.base import BaseModel


class User(BaseModel):
    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)

    # Relationships
    projects: Mapped[list["RepositoryProject"]] = relationship(back_populates="owner")
