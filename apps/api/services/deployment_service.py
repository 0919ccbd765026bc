"""Deployment service: turns a pushed commit into a PENDING deployment.

Flow for one attempt:
    next version → request image build → insert ProjectDeployment
    → publish PROJECT_DEPLOYMENT_CREATED → return the deployment

Versions are allocated optimistically (max + 1). When two requests race
for the same version, the (project_id, version) unique constraint rejects
one insert and that request starts over with a fresh version. Every
attempt requests its own build; builds from lost attempts are not
cancelled.
"""

import logging
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from apps.api.config import settings
from apps.api.models.deployment import DEPLOYMENT_VERSION_CONSTRAINT, DeploymentStatus, ProjectDeployment
from apps.api.models.environment import RuntimeEnvironment
from apps.api.models.github import GitHubAppAuthorization
from apps.api.models.project import RepositoryProject
from apps.api.repositories import deployment_repo, project_repo
from apps.api.schemas.github import GitHubCommit
from apps.api.services.build_client import BuildClient, build_client
from apps.api.services.task_queue import TaskQueue, task_queue
from events.schemas import EventType

logger = logging.getLogger(__name__)

UNKNOWN_COMMITTER = "Unknown"


# ── Build files ───────────────────────────────────────

def format_file_contents(contents: str) -> str:
    """Drop leading blank lines and each line's indentation.

    Lets templates be written indented inside Python code:

            FROM node:18-bullseye-slim
            WORKDIR /app

    becomes

        FROM node:18-bullseye-slim
        WORKDIR /app

    Whitespace inside or at the end of a line is kept.
    """
    return "\n".join(line.lstrip() for line in contents.lstrip().split("\n"))


def render_dockerfile(build_command: str, start_command: str, base_image: str | None = None) -> str:
    """Dockerfile for a Node project: install/build with build_command, run start_command.

    start_command goes into exec-form CMD, e.g. "node dist/index.js"
    → CMD ["node", "dist/index.js"].
    """
    cmd = ", ".join(f'"{token}"' for token in start_command.split())

    return format_file_contents(f"""
        FROM {base_image or settings.build_base_image}
        WORKDIR /app
        COPY package*.json ./
        RUN {build_command}
        COPY . .
        CMD [{cmd}]
    """)


def render_dockerignore() -> str:
    return format_file_contents("""
        node_modules
    """)


def get_commit_author(commit: GitHubCommit) -> str:
    """Best display name for whoever made the commit.

    Git author name, then the GitHub committer login, then the GitHub
    author login, then "Unknown".
    """
    candidates = (
        commit.commit.author.name if commit.commit.author else None,
        commit.committer.login if commit.committer else None,
        commit.author.login if commit.author else None,
    )
    return next((candidate for candidate in candidates if candidate), UNKNOWN_COMMITTER)


def is_version_collision(error: Exception) -> bool:
    """True if error is the (project_id, version) unique constraint firing."""
    return isinstance(error, IntegrityError) and DEPLOYMENT_VERSION_CONSTRAINT in str(error.orig)


# ── Service ───────────────────────────────────────────

class DeploymentCreator:
    """Creates deployments, retrying on version collisions."""

    def __init__(
        self,
        builds: BuildClient | None = None,
        queue: TaskQueue | None = None,
        max_attempts: int | None = None,
    ):
        self._build_client = builds or build_client
        self._task_queue = queue or task_queue
        self.max_attempts = settings.deployment_max_attempts if max_attempts is None else max_attempts

    async def create(
        self,
        db: AsyncSession,
        project: RepositoryProject,
        authorization: GitHubAppAuthorization,
        environment: RuntimeEnvironment,
        commit: GitHubCommit,
        attempt: int = 0,
    ) -> ProjectDeployment | None:
        """Create a PENDING deployment of commit to environment.

        Returns:
            The new deployment, or None if every attempt lost the version
            race (up to max_attempts in total, counting from attempt).

        Raises:
            BuildServiceException: the build could not be requested.
            SQLAlchemyError: any database failure other than a version collision.
        """
        # A rollback expires every instance in the session, and an expired
        # attribute cannot be lazily reloaded under AsyncSession. Read
        # everything the retries need up front.
        project_id = project.id
        project_name = project.name
        branch = project.branch
        token = authorization.installation_access_token
        environment_id = environment.id

        dockerfile = render_dockerfile(project.build_command, project.start_command)
        dockerignore = render_dockerignore()
        committer = get_commit_author(commit)

        while attempt < self.max_attempts:
            version = await project_repo.get_next_deployment_version(db, project_id)
            tag = f"[{project_name}][v{version}][attempt={attempt + 1}]"

            # The token is a live credential, keep it out of the logs
            logger.info("%s Requesting image build from branch %s", tag, branch)
            build = await self._build_client.build_image_from_github(
                dockerfile=dockerfile,
                dockerignore=dockerignore,
                token=token,
                repository=project_name,
                branch=branch,
            )
            logger.info("%s Build started with id %s", tag, build.build_id)

            try:
                # build_started_at is set now: the build is already running even
                # though the deployment may still be cancelled before it goes out
                deployment = await deployment_repo.create(
                    db,
                    version=version,
                    build_id=build.build_id,
                    build_started_at=datetime.now(timezone.utc),
                    project_id=project_id,
                    environment_id=environment_id,
                    status=DeploymentStatus.PENDING,
                    branch=branch,
                    commit_hash=commit.sha,
                    commit_message=commit.commit.message,
                    committer=committer,
                    dockerfile=dockerfile,
                    docker_ignore=dockerignore,
                )
            except SQLAlchemyError as error:
                collision = is_version_collision(error)
                if not collision:
                    logger.error("%s Error creating deployment: %s", tag, error)

                try:
                    await db.rollback()
                except SQLAlchemyError as rollback_error:
                    logger.error("%s Rollback failed: %s", tag, rollback_error)
                    raise error

                if not collision:
                    raise
                logger.warning(
                    "%s Version %s already taken, build %s will not be deployed",
                    tag,
                    version,
                    build.build_id,
                )
                attempt += 1
                continue

            await self._task_queue.publish(
                EventType.PROJECT_DEPLOYMENT_CREATED.value,
                {"id": str(deployment.id)},
                source="deployment_service",
            )
            logger.info("%s Deployment %s created", tag, deployment.id)
            return deployment

        logger.warning(
            "Giving up creating a deployment for %s after %s attempts",
            project_name,
            self.max_attempts,
        )
        return None


# Singleton
deployment_creator = DeploymentCreator()
