from apps.api.schemas.base import BaseSchema, BaseResponse
from apps.api.schemas.github import GitActor, GitHubAccount, CommitDetails, GitHubCommit
from apps.api.schemas.deployment import (
    DeploymentCreate, DeploymentResponse, DeploymentDetailResponse, DeploymentListResponse,
)


__all__ = [
    # Base
    "BaseSchema", "BaseResponse",
    # GitHub
    "GitActor", "GitHubAccount", "CommitDetails", "GitHubCommit",
    # Deployment
    "DeploymentCreate", "DeploymentResponse", "DeploymentDetailResponse", "DeploymentListResponse",
]
