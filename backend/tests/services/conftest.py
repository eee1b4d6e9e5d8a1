"""Service test fixtures — async DB + FastAPI test client + a seeded org.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use a new test session per request
    - db_manager patched so the readiness probe sees the test engine
    - Seed data: three users, one "legal" team (alice, bob), one project in org-1

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (row locks are no-ops here; concurrency is covered by the pure checks)
    - Graph state built through the API where possible, so tests exercise the
      same write path as clients
"""


import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

import taskgraph.models  # noqa: F401
from taskgraph.db.base import Base
from taskgraph.infrastructure.database import get_db, DatabaseSessionManager
from taskgraph.models.project import Project
from taskgraph.models.team import Team, TeamMember
from taskgraph.models.user import User
import taskgraph.infrastructure.database as db_module
from taskgraph.main import app
from tests.services.graph_helpers import Seed


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
async def seed(test_db) -> Seed:
    """Users, a team and an empty project in org-1."""
    alice = User(name="Alice", email="alice@example.com")
    bob = User(name="Bob", email="bob@example.com")
    carol = User(name="Carol", email="carol@example.com")
    test_db.add_all([alice, bob, carol])
    await test_db.flush()

    team = Team(org_id="org-1", name="legal")
    team.members = [TeamMember(user_id=alice.id), TeamMember(user_id=bob.id)]
    project = Project(org_id="org-1", name="Launch")
    test_db.add_all([team, project])
    await test_db.commit()

    return Seed(
        org_id="org-1",
        project_id=project.id,
        alice=alice.id,
        bob=bob.id,
        carol=carol.id,
        team_id=team.id,
    )
