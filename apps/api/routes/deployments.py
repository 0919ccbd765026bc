"""Deployment routes: deploy a commit, list and inspect a project's deployments.

All routes are protected. Users can only deploy and see their OWN projects.
"""

import logging
import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from apps.api.auth import get_current_user
from apps.api.database import get_db
from apps.api.exceptions import FerryException, ForbiddenException, NotFoundException
from apps.api.models.project import RepositoryProject
from apps.api.models.user import User
from apps.api.repositories import deployment_repo, environment_repo, project_repo
from apps.api.schemas.deployment import (
    DeploymentCreate,
    DeploymentDetailResponse,
    DeploymentListResponse,
    DeploymentResponse,
)
from apps.api.services.deployment_service import deployment_creator

router = APIRouter(prefix="/projects/{project_id}/deployments", tags=["deployments"])
logger = logging.getLogger(__name__)


async def _get_user_project(
    project_id: uuid.UUID,
    current_user: User,
    db: AsyncSession,
) -> RepositoryProject:
    """Fetch a project (with its GitHub authorization) and verify ownership."""
    project = await project_repo.get_with_authorization(db, project_id)
    if not project:
        raise NotFoundException("Project", str(project_id))
    if project.owner_id != current_user.id:
        raise ForbiddenException("You don't have access to this project")
    return project


@router.post("", response_model=DeploymentResponse, status_code=201)
async def create_deployment(
    project_id: uuid.UUID,
    body: DeploymentCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Build and deploy a commit of the project's branch.

    Returns as soon as the build is requested and the PENDING deployment is
    recorded; the deploy worker takes it from there.

    Example:
        POST /projects/{id}/deployments
        { "environment_id": "...", "commit": { "sha": "abc123", "commit": { "message": "Fix login" } } }
    """
    project = await _get_user_project(project_id, current_user, db)

    if project.authorization is None:
        raise FerryException(
            message="Project is not connected to a GitHub App installation",
            status_code=400,
        )

    environment = await environment_repo.get_for_project(db, project.id, body.environment_id)
    if not environment:
        raise NotFoundException("Environment", str(body.environment_id))

    # The creator rolls the session back on a version collision, which
    # expires these instances; keep what the 409 path logs.
    project_name, environment_slug = project.name, environment.slug

    deployment = await deployment_creator.create(
        db,
        project=project,
        authorization=project.authorization,
        environment=environment,
        commit=body.commit,
    )
    if deployment is None:
        logger.warning("Deployment of %s to %s abandoned after version collisions", project_name, environment_slug)
        raise FerryException(
            message="Could not allocate a deployment version, please retry",
            status_code=409,
            details={"project_id": str(project_id)},
        )

    return DeploymentResponse.model_validate(deployment)


@router.get("", response_model=DeploymentListResponse)
async def list_deployments(
    project_id: uuid.UUID,
    skip: int = Query(default=0, ge=0, description="Number of deployments to skip"),
    limit: int = Query(default=20, ge=1, le=100, description="Max deployments to return"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List a project's deployments, newest version first."""
    project = await _get_user_project(project_id, current_user, db)

    deployments = await deployment_repo.list_by_project(db, project.id, skip=skip, limit=limit)
    total = await deployment_repo.count_by_project(db, project.id)

    return DeploymentListResponse(
        deployments=[DeploymentResponse.model_validate(d) for d in deployments],
        total=total,
    )


@router.get("/{deployment_id}", response_model=DeploymentDetailResponse)
async def get_deployment(
    project_id: uuid.UUID,
    deployment_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get one deployment, including the Dockerfile it was built with."""
    project = await _get_user_project(project_id, current_user, db)

    deployment = await deployment_repo.get_by_id(db, deployment_id)
    if not deployment or deployment.project_id != project.id:
        raise NotFoundException("Deployment", str(deployment_id))

    return DeploymentDetailResponse.model_validate(deployment)
