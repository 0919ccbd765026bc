from apps.api.repositories.base import BaseRepository
from apps.api.repositories.user import UserRepository, user_repo
from apps.api.repositories.project import ProjectRepository, project_repo
from apps.api.repositories.environment import EnvironmentRepository, environment_repo
from apps.api.repositories.deployment import DeploymentRepository, deployment_repo
from apps.api.repositories.invite import InviteRepository, invite_repo

__all__ = [
    "BaseRepository",
    "UserRepository", "user_repo",
    "ProjectRepository", "project_repo",
    "EnvironmentRepository", "environment_repo",
    "DeploymentRepository", "deployment_repo",
    "InviteRepository", "invite_repo",
]
