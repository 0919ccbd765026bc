from sqlalchemy import String, Text, BigInteger
from sqlalchemy.orm import Mapped, mapped_column, relationship

from apps.api.models.base import BaseModel


class GitHubAppAuthorization(BaseModel):
    """A GitHub App installation that grants access to repositories.

    installation_access_token is short-lived. Whoever hands an authorization
    to the deployment flow is responsible for refreshing it first.
    """

    __tablename__ = "github_app_authorizations"

    installation_id: Mapped[int] = mapped_column(BigInteger, unique=True, nullable=False)
    account_name: Mapped[str] = mapped_column(String(255), nullable=False)  # org or user the app is installed on
    installation_access_token: Mapped[str] = mapped_column(Text, nullable=False)

    projects: Mapped[list["RepositoryProject"]] = relationship(back_populates="authorization")
