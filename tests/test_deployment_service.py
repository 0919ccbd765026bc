"""DeploymentCreator: happy path, version collisions, other DB errors (no build service, no DB)."""
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from apps.api.config import settings
from apps.api.exceptions import BuildServiceException
from apps.api.models.deployment import ProjectDeployment, DeploymentStatus
from apps.api.repositories import deployment_repo, project_repo
from apps.api.services.build_client import BuildResult
from apps.api.services.deployment_service import DeploymentCreator, is_version_collision


def _collision() -> IntegrityError:
    return IntegrityError(
        "INSERT INTO project_deployments ...",
        {},
        Exception('duplicate key value violates unique constraint "uq_project_deployments_project_id_version"'),
    )


def _other_integrity_error() -> IntegrityError:
    return IntegrityError(
        "INSERT INTO project_deployments ...",
        {},
        Exception('insert or update on table "project_deployments" violates foreign key constraint "project_deployments_environment_id_fkey"'),
    )


@pytest.fixture
def builds():
    b = MagicMock()
    b.build_image_from_github = AsyncMock(return_value=BuildResult(build_id="bld_123"))
    return b


@pytest.fixture
def queue():
    q = MagicMock()
    q.publish = AsyncMock()
    return q


@pytest.fixture
def creator(builds, queue) -> DeploymentCreator:
    return DeploymentCreator(builds=builds, queue=queue, max_attempts=4)


@pytest.fixture
def deployment() -> ProjectDeployment:
    d = MagicMock(spec=ProjectDeployment)
    d.id = uuid4()
    return d


# ─── is_version_collision ───────────────────────────────────────────────────

def test_is_version_collision_true_for_version_constraint():
    assert is_version_collision(_collision()) is True


def test_is_version_collision_false_for_other_constraint():
    assert is_version_collision(_other_integrity_error()) is False


def test_is_version_collision_false_for_non_integrity_error():
    assert is_version_collision(ValueError("uq_project_deployments_project_id_version")) is False


# ─── create ─────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_create_success_publishes_one_event(
    creator, builds, queue, db, project, authorization, environment, commit, deployment
):
    with patch.object(project_repo, "get_next_deployment_version", new_callable=AsyncMock, return_value=7), \
         patch.object(deployment_repo, "create", new_callable=AsyncMock, return_value=deployment) as create:
        out = await creator.create(db, project, authorization, environment, commit)

    assert out is deployment
    create.assert_awaited_once()
    kwargs = create.call_args.kwargs
    assert kwargs["version"] == 7
    assert kwargs["build_id"] == "bld_123"
    assert kwargs["build_started_at"] is not None
    assert kwargs["status"] == DeploymentStatus.PENDING
    assert kwargs["project_id"] == project.id
    assert kwargs["environment_id"] == environment.id
    assert kwargs["branch"] == "main"
    assert kwargs["commit_hash"] == commit.sha
    assert kwargs["commit_message"] == "Fix login redirect"
    assert kwargs["committer"] == "Ada Lovelace"
    assert 'CMD ["node", "dist/index.js"]' in kwargs["dockerfile"]
    assert kwargs["docker_ignore"] == "node_modules\n"

    queue.publish.assert_awaited_once()
    name, payload = queue.publish.call_args.args
    assert name == "PROJECT_DEPLOYMENT_CREATED"
    assert payload == {"id": str(deployment.id)}
    db.rollback.assert_not_called()


@pytest.mark.asyncio
async def test_create_sends_build_request(creator, builds, db, project, authorization, environment, commit, deployment):
    with patch.object(project_repo, "get_next_deployment_version", new_callable=AsyncMock, return_value=1), \
         patch.object(deployment_repo, "create", new_callable=AsyncMock, return_value=deployment):
        await creator.create(db, project, authorization, environment, commit)

    builds.build_image_from_github.assert_awaited_once()
    kwargs = builds.build_image_from_github.call_args.kwargs
    assert kwargs["token"] == "ghs_installation_token"
    assert kwargs["repository"] == "acme/web"
    assert kwargs["branch"] == "main"
    assert kwargs["dockerfile"].startswith("FROM ")
    assert kwargs["dockerignore"] == "node_modules\n"


@pytest.mark.asyncio
async def test_create_gives_up_after_four_collisions(
    creator, builds, queue, db, project, authorization, environment, commit
):
    with patch.object(project_repo, "get_next_deployment_version", new_callable=AsyncMock, return_value=3) as next_version, \
         patch.object(deployment_repo, "create", new_callable=AsyncMock, side_effect=_collision()) as create:
        out = await creator.create(db, project, authorization, environment, commit)

    assert out is None
    assert create.await_count == 4
    assert next_version.await_count == 4
    assert builds.build_image_from_github.await_count == 4  # one build per attempt
    assert db.rollback.await_count == 4
    queue.publish.assert_not_called()


@pytest.mark.asyncio
async def test_create_retries_with_fresh_version(
    creator, queue, db, project, authorization, environment, commit, deployment
):
    with patch.object(project_repo, "get_next_deployment_version", new_callable=AsyncMock, side_effect=[4, 5]), \
         patch.object(deployment_repo, "create", new_callable=AsyncMock, side_effect=[_collision(), deployment]) as create:
        out = await creator.create(db, project, authorization, environment, commit)

    assert out is deployment
    assert [c.kwargs["version"] for c in create.call_args_list] == [4, 5]
    queue.publish.assert_awaited_once()


@pytest.mark.asyncio
async def test_create_starting_attempt_counts_toward_limit(
    creator, db, project, authorization, environment, commit
):
    with patch.object(project_repo, "get_next_deployment_version", new_callable=AsyncMock, return_value=1), \
         patch.object(deployment_repo, "create", new_callable=AsyncMock, side_effect=_collision()) as create:
        out = await creator.create(db, project, authorization, environment, commit, attempt=2)

    assert out is None
    assert create.await_count == 2


@pytest.mark.asyncio
async def test_create_propagates_other_integrity_errors_without_retry(
    creator, builds, queue, db, project, authorization, environment, commit
):
    error = _other_integrity_error()
    with patch.object(project_repo, "get_next_deployment_version", new_callable=AsyncMock, return_value=1), \
         patch.object(deployment_repo, "create", new_callable=AsyncMock, side_effect=error) as create:
        with pytest.raises(IntegrityError) as exc_info:
            await creator.create(db, project, authorization, environment, commit)

    assert exc_info.value is error
    create.assert_awaited_once()
    builds.build_image_from_github.assert_awaited_once()
    db.rollback.assert_awaited_once()
    queue.publish.assert_not_called()


@pytest.mark.asyncio
async def test_create_propagates_operational_errors(creator, db, project, authorization, environment, commit):
    error = OperationalError("INSERT ...", {}, Exception("connection reset"))
    with patch.object(project_repo, "get_next_deployment_version", new_callable=AsyncMock, return_value=1), \
         patch.object(deployment_repo, "create", new_callable=AsyncMock, side_effect=error) as create:
        with pytest.raises(OperationalError):
            await creator.create(db, project, authorization, environment, commit)

    create.assert_awaited_once()


@pytest.mark.asyncio
async def test_create_build_failure_skips_insert(creator, builds, queue, db, project, authorization, environment, commit):
    builds.build_image_from_github.side_effect = BuildServiceException("Build service unreachable")
    with patch.object(project_repo, "get_next_deployment_version", new_callable=AsyncMock, return_value=1), \
         patch.object(deployment_repo, "create", new_callable=AsyncMock) as create:
        with pytest.raises(BuildServiceException):
            await creator.create(db, project, authorization, environment, commit)

    create.assert_not_called()
    queue.publish.assert_not_called()


@pytest.mark.asyncio
async def test_create_keeps_original_error_when_rollback_fails(
    creator, db, project, authorization, environment, commit
):
    error = _other_integrity_error()
    db.rollback.side_effect = OperationalError("ROLLBACK", {}, Exception("connection lost"))
    with patch.object(project_repo, "get_next_deployment_version", new_callable=AsyncMock, return_value=1), \
         patch.object(deployment_repo, "create", new_callable=AsyncMock, side_effect=error):
        with pytest.raises(IntegrityError) as exc_info:
            await creator.create(db, project, authorization, environment, commit)

    assert exc_info.value is error


@pytest.mark.asyncio
async def test_create_stops_retrying_when_rollback_fails(
    creator, builds, db, project, authorization, environment, commit
):
    collision = _collision()
    db.rollback.side_effect = OperationalError("ROLLBACK", {}, Exception("connection lost"))
    with patch.object(project_repo, "get_next_deployment_version", new_callable=AsyncMock, return_value=1), \
         patch.object(deployment_repo, "create", new_callable=AsyncMock, side_effect=collision) as create:
        with pytest.raises(IntegrityError) as exc_info:
            await creator.create(db, project, authorization, environment, commit)

    assert exc_info.value is collision
    create.assert_awaited_once()
    builds.build_image_from_github.assert_awaited_once()


@pytest.mark.asyncio
async def test_create_reads_nothing_from_entities_after_rollback(
    creator, builds, queue, db, project, authorization, environment, commit, deployment
):
    async def rollback():
        # Rolled-back instances are expired and cannot be reloaded lazily
        for attr in ("id", "name", "branch", "build_command", "start_command"):
            delattr(project, attr)
        del authorization.installation_access_token
        del environment.id

    db.rollback.side_effect = rollback
    project_id, environment_id = project.id, environment.id

    with patch.object(project_repo, "get_next_deployment_version", new_callable=AsyncMock, side_effect=[1, 2]) as next_version, \
         patch.object(deployment_repo, "create", new_callable=AsyncMock, side_effect=[_collision(), deployment]) as create:
        out = await creator.create(db, project, authorization, environment, commit)

    assert out is deployment
    assert [c.args[1] for c in next_version.call_args_list] == [project_id, project_id]
    second = create.call_args_list[1].kwargs
    assert second["project_id"] == project_id
    assert second["environment_id"] == environment_id
    assert second["branch"] == "main"
    assert builds.build_image_from_github.call_args_list[1].kwargs["token"] == "ghs_installation_token"
    queue.publish.assert_awaited_once()


# ─── max_attempts ───────────────────────────────────────────────────────────

def test_max_attempts_defaults_to_settings(builds, queue):
    assert DeploymentCreator(builds=builds, queue=queue).max_attempts == settings.deployment_max_attempts


@pytest.mark.asyncio
async def test_max_attempts_zero_makes_no_attempt(builds, queue, db, project, authorization, environment, commit):
    creator = DeploymentCreator(builds=builds, queue=queue, max_attempts=0)
    with patch.object(project_repo, "get_next_deployment_version", new_callable=AsyncMock) as next_version:
        out = await creator.create(db, project, authorization, environment, commit)

    assert out is None
    next_version.assert_not_called()
    builds.build_image_from_github.assert_not_called()
