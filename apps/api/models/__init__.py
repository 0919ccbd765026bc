from apps.api.models.base import BaseModel
from apps.api.models.user import User
from apps.api.models.workspace import Workspace, WorkspaceInvite
from apps.api.models.github import GitHubAppAuthorization
from apps.api.models.project import RepositoryProject
from apps.api.models.environment import RuntimeEnvironment
from apps.api.models.deployment import ProjectDeployment, DeploymentStatus, DEPLOYMENT_VERSION_CONSTRAINT

__all__ = [
    "BaseModel",
    "User",
    "Workspace", "WorkspaceInvite",
    "GitHubAppAuthorization",
    "RepositoryProject",
    "RuntimeEnvironment",
    "ProjectDeployment", "DeploymentStatus", "DEPLOYMENT_VERSION_CONSTRAINT",
]
