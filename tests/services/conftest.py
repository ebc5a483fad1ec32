"""Service test fixtures — in-memory SQLite database, registry, dispatcher, test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database with the users and
      UserAccounts tables
    - The registry is built by hand, mirroring what introspection reports for
      the same tables on PostgreSQL
    - get_dispatcher dependency overridden; app.state.db points at the test DB

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for statement
      execution (PostgreSQL-only catalog SQL is tested against a fake connection)
    - StaticPool: every connection sees the same in-memory database
"""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from psql_mapper.api.routes.resources import get_dispatcher
from psql_mapper.core.domain_types import Registry
from psql_mapper.infrastructure.database import DatabaseSessionManager
from psql_mapper.main import app
from psql_mapper.services.crud_engine import CrudEngine
from psql_mapper.services.dispatcher import RequestDispatcher
from tests.services.tables import SCHEMA, USER_ACCOUNTS, USERS


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        for ddl in SCHEMA:
            await conn.execute(text(ddl))
    yield engine
    await engine.dispose()


@pytest.fixture
def db(test_engine):
    return DatabaseSessionManager.from_engine(test_engine)


@pytest.fixture
def registry():
    return Registry.from_behaviors([USERS, USER_ACCOUNTS])


@pytest.fixture
def crud(db):
    return CrudEngine(db)


@pytest.fixture
def dispatcher(registry, crud):
    return RequestDispatcher(registry, crud)


@pytest.fixture
async def client(dispatcher, db):
    """FastAPI test client wired to the test registry and database."""
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher
    original_db = getattr(app.state, "db", None)
    original_dispatcher = getattr(app.state, "dispatcher", None)
    app.state.db = db
    app.state.dispatcher = dispatcher

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    app.state.db = original_db
    app.state.dispatcher = original_dispatcher


@pytest.fixture
async def alice(crud):
    """Insert one user and return the created row."""
    rows = await crud.create(
        USERS, {"name": "alice", "email": "alice@example.com", "active": "true"},
    )
    return rows[0]
