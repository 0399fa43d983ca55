"""Service test fixtures — async DB + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - db_manager singleton swapped for one bound to the test engine, so both the
      route dependency and the readiness check see the test DB

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
    - StaticPool: one shared connection, otherwise each checkout sees an empty DB
"""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool

from waitlist_api.db.base import Base
from waitlist_api.infrastructure.database import DatabaseSessionManager
from waitlist_api.infrastructure.storage_gateway import EntrantGateway
from waitlist_api.models.entrant import Entrant
import waitlist_api.infrastructure.database as db_module
from waitlist_api.main import app


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
        hide_parameters=True,
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
def test_manager(test_engine, test_session_factory):
    """Session manager wired to the test engine without building a new pool."""
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = test_engine
    manager._session_factory = test_session_factory
    return manager


@pytest.fixture
def gateway(test_manager):
    return EntrantGateway(test_manager)


@pytest.fixture
async def client(test_manager):
    """FastAPI test client with the db_manager singleton pointed at the test DB."""
    saved_manager = db_module.db_manager
    db_module.db_manager = test_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    db_module.db_manager = saved_manager


@pytest.fixture
def fetch_entrants(test_session_factory):
    """Read back rows for an email using a fresh session."""
    async def _fetch(email: str) -> list[Entrant]:
        async with test_session_factory() as session:
            result = await session.execute(
                select(Entrant).where(Entrant.email == email),
            )
            return list(result.scalars().all())
    return _fetch
