"""Pytest fixtures for API and service tests.

Uses a minimal app with a no-op lifespan so no Redis, build service or
database is needed. Auth and DB are overridden per test.
"""
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock
import uuid

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession

from apps.api.exceptions import FerryException, ferry_exception_handler
from apps.api.models.environment import RuntimeEnvironment
from apps.api.models.github import GitHubAppAuthorization
from apps.api.models.project import RepositoryProject
from apps.api.models.user import User
from apps.api.routes import deployments, health, invites
from apps.api.schemas.github import GitHubCommit


@asynccontextmanager
async def noop_lifespan(app: FastAPI):
    """Minimal lifespan for tests: no Redis or build service."""
    yield


@pytest.fixture
def test_app() -> FastAPI:
    app = FastAPI(lifespan=noop_lifespan)
    app.add_exception_handler(FerryException, ferry_exception_handler)
    app.include_router(health.router)
    app.include_router(invites.router)
    app.include_router(deployments.router)
    return app


@pytest.fixture
def client(test_app: FastAPI) -> TestClient:
    return TestClient(test_app)


@pytest.fixture
def user() -> User:
    u = MagicMock(spec=User)
    u.id = uuid.uuid4()
    u.email = "b@x.com"
    u.is_active = True
    return u


@pytest.fixture
def authorization() -> GitHubAppAuthorization:
    a = MagicMock(spec=GitHubAppAuthorization)
    a.id = uuid.uuid4()
    a.installation_access_token = "ghs_installation_token"
    return a


@pytest.fixture
def project(user: User, authorization: GitHubAppAuthorization) -> RepositoryProject:
    p = MagicMock(spec=RepositoryProject)
    p.id = uuid.uuid4()
    p.name = "acme/web"
    p.branch = "main"
    p.build_command = "npm install && npm run build"
    p.start_command = "node dist/index.js"
    p.owner_id = user.id
    p.authorization = authorization
    return p


@pytest.fixture
def environment(project: RepositoryProject) -> RuntimeEnvironment:
    e = MagicMock(spec=RuntimeEnvironment)
    e.id = uuid.uuid4()
    e.slug = "production"
    e.project_id = project.id
    return e


@pytest.fixture
def commit() -> GitHubCommit:
    return GitHubCommit.model_validate({
        "sha": "9f2c1e0b7a6d5c4b3a29180716f5e4d3c2b1a098",
        "commit": {"message": "Fix login redirect", "author": {"name": "Ada Lovelace", "email": "ada@x.com"}},
        "author": {"login": "ada"},
        "committer": {"login": "web-flow"},
    })


@pytest.fixture
def db() -> AsyncSession:
    session = MagicMock(spec=AsyncSession)
    session.rollback = AsyncMock()
    return session
