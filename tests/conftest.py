"""
Pytest configuration and shared fixtures.

Every test gets its own in-memory SQLite database; HTTP tests talk to the
FastAPI app through httpx's ASGI transport with get_session overridden.
"""

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from grantmatch import models  # noqa: F401  (registers tables)
from grantmatch.app import app
from grantmatch.database import Base, get_session
from grantmatch.seed import seed_grants


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_maker):
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def seeded(session_maker):
    """Database pre-filled with the demo grants."""
    async with session_maker() as session:
        await seed_grants(session)


@pytest.fixture
def asgi_transport(session_maker):
    async def _override_session():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_session] = _override_session
    yield httpx.ASGITransport(app=app)
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(asgi_transport):
    async with httpx.AsyncClient(transport=asgi_transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def user_headers():
    return {"X-User-Id": "user-1"}


@pytest.fixture
def company_payload():
    return {
        "name": "Procesos SL",
        "location": "Nacional",
        "size": "small",
        "description": "Empresa de digitalizacion de procesos industriales",
    }
