"""Root conftest — shared fixtures: in-memory reference node and API clients.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_node dependency overridden; the lifespan never runs under ASGITransport
    - Clients send an X-API-KEY header by default

Design Decisions:
    - StaticPool: one shared connection so every session sees the same
      in-memory database
    - Deterministic clock (one tick per call) so identical requests submitted in
      a row still get distinct timestamps and ids
"""

import itertools
import os

# Ensure tests never touch a real node store
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

import ledger_gateway.models  # noqa: F401
from ledger_gateway.api.dependencies import get_node
from ledger_gateway.db.base import Base
from ledger_gateway.infrastructure.database import DatabaseSessionManager
from ledger_gateway.infrastructure.reference_node import ReferenceNode
from ledger_gateway.main import app
from tests.fake_node import FakeNode

API_HEADERS = {"X-API-KEY": "test-api-key"}


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def db_manager(test_engine):
    return DatabaseSessionManager.from_engine(test_engine)


def _clock():
    ticks = itertools.count(1_700_000_000)
    return lambda: next(ticks)


@pytest.fixture
def reference_node(db_manager):
    return ReferenceNode(db_manager, "test-node-key", clock=_clock())


@pytest.fixture
def approval_node(db_manager):
    return ReferenceNode(
        db_manager, "test-node-key", approval_required=True, clock=_clock(),
    )


@pytest.fixture
def fake_node():
    return FakeNode()


async def _client_for(node):
    app.dependency_overrides[get_node] = lambda: node
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
        headers=API_HEADERS,
    ) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
async def client(reference_node):
    """API client backed by the in-memory reference node."""
    async for c in _client_for(reference_node):
        yield c


@pytest.fixture
async def approval_client(approval_node):
    """API client backed by a reference node that requires votes."""
    async for c in _client_for(approval_node):
        yield c


@pytest.fixture
async def fake_client(fake_node):
    """API client backed by the recording FakeNode."""
    async for c in _client_for(fake_node):
        yield c
