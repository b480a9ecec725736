# tests/conftest.py
"""
Shared pytest fixtures.

Provides:
- In-memory MongoDB (mongomock-motor) with Beanie initialised, fresh per test
- Async HTTP client bound to the FastAPI app
- Users, projects and signed bearer tokens
"""
import os

# Must be set before taskboard.core.config is imported
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("JWT_SECRET", "test-secret-key")

from datetime import datetime, timedelta, timezone

import pytest
from faker import Faker
from httpx import ASGITransport, AsyncClient
from jose import jwt
from mongomock_motor import AsyncMongoMockClient

from taskboard.core.config import settings
from taskboard.db import connect_db, disconnect_db
from taskboard.main import app
from taskboard.models import Project, TaskCreate, User, UserPublic
from taskboard.tasks import repository

fake = Faker()


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture(scope="session", autouse=True)
def assert_api_routes_exist():
    """
    FAIL FAST: Verify the task routes are registered before any tests run.
    """
    routes = set(app.openapi()["paths"])
    assert "/api/tasks" in routes, f"Task routes not registered. Found routes: {sorted(routes)}"


@pytest.fixture(autouse=True)
async def db_connection():
    await connect_db(client=AsyncMongoMockClient())
    yield
    await disconnect_db()


@pytest.fixture
async def client():
    """Async HTTP client for testing FastAPI endpoints."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ═══════════════════════════════════════════════════════
# FIXTURES - Users, projects, tokens
# ═══════════════════════════════════════════════════════

async def _create_user(**overrides) -> User:
    data = {
        "name": fake.name(),
        "email": fake.unique.email(),
        "password": "$2b$12$" + fake.sha256()[:53],
        "avatar": fake.image_url(),
    }
    data.update(overrides)
    user = User(**data)
    await user.insert()
    return user


def public(user: User) -> UserPublic:
    return UserPublic(id=user.id, name=user.name, email=user.email, avatar=user.avatar)


@pytest.fixture
async def user() -> User:
    return await _create_user()


@pytest.fixture
async def other_user() -> User:
    return await _create_user()


@pytest.fixture
def identity(user) -> UserPublic:
    """The requesting user as the auth gate would resolve it."""
    return public(user)


@pytest.fixture
async def project(user) -> Project:
    project = Project(title=fake.catch_phrase()[:100], owner=user.id)
    await project.insert()
    return project


@pytest.fixture
async def other_project(user) -> Project:
    project = Project(title=fake.catch_phrase()[:100], owner=user.id)
    await project.insert()
    return project


def make_token(subject, claim: str = "sub", expires_in: timedelta = timedelta(hours=1), secret: str = None) -> str:
    payload = {claim: str(subject), "exp": datetime.now(timezone.utc) + expires_in}
    return jwt.encode(payload, secret or settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


@pytest.fixture
def auth_headers(user) -> dict:
    return {"Authorization": f"Bearer {make_token(user.id)}"}


@pytest.fixture
def make_task(project, identity):
    """Factory creating tasks through the repository contract."""
    async def _make(**fields):
        data = {"title": fake.sentence(nb_words=4), "project": project.id}
        data.update(fields)
        return await repository.create_task(TaskCreate(**data), identity)
    return _make


@pytest.fixture
def token_for():
    """Mint a bearer token: token_for(subject, claim="sub", expires_in=..., secret=...)."""
    return make_token


@pytest.fixture
def public_identity():
    """Convert a stored User into the auth gate's identity."""
    return public
