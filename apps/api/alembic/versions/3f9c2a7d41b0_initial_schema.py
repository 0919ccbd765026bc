"""initial schema

Revision ID: 3f9c2a7d41b0
Revises:
Create Date: 2026-10-17 10:12:41.318204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID


# revision identifiers, used by Alembic.
revision: str = '3f9c2a7d41b0'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _base_columns() -> list[sa.Column]:
    return [
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    """Upgrade schema - users, workspaces, projects, environments, deployments."""
    op.create_table(
        "users",
        *_base_columns(),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "workspaces",
        *_base_columns(),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(100), nullable=False),
    )
    op.create_index("ix_workspaces_slug", "workspaces", ["slug"], unique=True)

    op.create_table(
        "workspace_invites",
        *_base_columns(),
        sa.Column("token", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("workspace_id", UUID(as_uuid=True), sa.ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False),
        sa.Column("inviter_id", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=True),
    )
    op.create_index("ix_workspace_invites_token", "workspace_invites", ["token"], unique=True)

    op.create_table(
        "github_app_authorizations",
        *_base_columns(),
        sa.Column("installation_id", sa.BigInteger, nullable=False, unique=True),
        sa.Column("account_name", sa.String(255), nullable=False),
        sa.Column("installation_access_token", sa.Text, nullable=False),
    )

    op.create_table(
        "repository_projects",
        *_base_columns(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("build_command", sa.Text, nullable=False),
        sa.Column("start_command", sa.Text, nullable=False),
        sa.Column("branch", sa.String(100), nullable=False, server_default="main"),
        sa.Column("owner_id", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("authorization_id", UUID(as_uuid=True), sa.ForeignKey("github_app_authorizations.id"), nullable=True),
    )

    op.create_table(
        "runtime_environments",
        *_base_columns(),
        sa.Column("slug", sa.String(50), nullable=False),
        sa.Column("project_id", UUID(as_uuid=True), sa.ForeignKey("repository_projects.id", ondelete="CASCADE"), nullable=False),
        sa.UniqueConstraint("project_id", "slug", name="uq_runtime_environments_project_id_slug"),
    )

    deployment_status = sa.Enum(
        "PENDING", "BUILDING", "DEPLOYING", "DEPLOYED", "ERROR", "CANCELLED",
        name="deployment_status",
    )
    op.create_table(
        "project_deployments",
        *_base_columns(),
        sa.Column("version", sa.Integer, nullable=False),
        sa.Column("status", deployment_status, nullable=False),
        sa.Column("build_id", sa.String(255), nullable=False),
        sa.Column("build_started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("branch", sa.String(255), nullable=False),
        sa.Column("commit_hash", sa.String(40), nullable=False),
        sa.Column("commit_message", sa.Text, nullable=False),
        sa.Column("committer", sa.String(255), nullable=False),
        sa.Column("dockerfile", sa.Text, nullable=False),
        sa.Column("docker_ignore", sa.Text, nullable=False),
        sa.Column("project_id", UUID(as_uuid=True), sa.ForeignKey("repository_projects.id", ondelete="CASCADE"), nullable=False),
        sa.Column("environment_id", UUID(as_uuid=True), sa.ForeignKey("runtime_environments.id", ondelete="CASCADE"), nullable=False),
        # Concurrent deploys race on this; the service retries the loser
        sa.UniqueConstraint("project_id", "version", name="uq_project_deployments_project_id_version"),
    )

    for table in (
        "users", "workspaces", "workspace_invites", "github_app_authorizations",
        "repository_projects", "runtime_environments", "project_deployments",
    ):
        op.create_index(f"ix_{table}_id", table, ["id"])


def downgrade() -> None:
    """Downgrade schema - drop everything created above."""
    op.drop_table("project_deployments")
    sa.Enum(name="deployment_status").drop(op.get_bind(), checkfirst=True)
    op.drop_table("runtime_environments")
    op.drop_table("repository_projects")
    op.drop_table("github_app_authorizations")
    op.drop_table("workspace_invites")
    op.drop_table("workspaces")
    op.drop_table("users")
