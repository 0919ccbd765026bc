"""Deployment schemas for request validation and response serialization."""

import uuid
from datetime import datetime

from pydantic import BaseModel

from apps.api.models.deployment import DeploymentStatus
from apps.api.schemas.base import BaseResponse
from apps.api.schemas.github import GitHubCommit


# ── Request Schemas ────────────────────────────────────

class DeploymentCreate(BaseModel):
    """Data to deploy a commit of a project to one of its environments."""
    environment_id: uuid.UUID
    commit: GitHubCommit


# ── Response Schemas ───────────────────────────────────

class DeploymentResponse(BaseResponse):
    """Deployment data returned by the API."""
    version: int
    status: DeploymentStatus
    build_id: str
    build_started_at: datetime | None = None
    branch: str
    commit_hash: str
    commit_message: str
    committer: str
    project_id: uuid.UUID
    environment_id: uuid.UUID


class DeploymentDetailResponse(DeploymentResponse):
    """Deployment with the generated build files included."""
    dockerfile: str
    docker_ignore: str


class DeploymentListResponse(BaseModel):
    """List of deployments for a project."""
    deployments: list[DeploymentResponse]
    total: int
