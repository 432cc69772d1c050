"""
Shared test fixtures for the contactbook backend test suite.

Sets up an async SQLite in-memory database, overrides the FastAPI
``get_db`` dependency, and provides an httpx client wired to the app.
"""

import os

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# ---- Environment overrides MUST come before any app imports ----
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

from contactbook.contacts.models import Contact  # noqa: E402,F401
from contactbook.database import Base, get_db  # noqa: E402
from contactbook.main import app  # noqa: E402

# ---------------------------------------------------------------------------
# Async engine & session factory for the test database
# ---------------------------------------------------------------------------
TEST_DATABASE_URL = "sqlite+aiosqlite://"

# One shared connection so every session sees the same in-memory database.
test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
TestSession = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


# ---------------------------------------------------------------------------
# Database lifecycle
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture(autouse=True)
async def setup_database():
    """Create all tables before each test, drop them afterward."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


# ---------------------------------------------------------------------------
# DB session fixture
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def db_session() -> AsyncSession:
    """Provide a DB session for direct service-layer tests."""
    async with TestSession() as session:
        yield session


# ---------------------------------------------------------------------------
# Dependency override
# ---------------------------------------------------------------------------
async def _override_get_db():
    async with TestSession() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


app.dependency_overrides[get_db] = _override_get_db


# ---------------------------------------------------------------------------
# HTTP client fixture
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def client() -> AsyncClient:
    """httpx async client wired to the FastAPI app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ---------------------------------------------------------------------------
# Convenience fixture: a contact record already in the DB
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def sample_contact(client: AsyncClient) -> dict:
    """Create and return Ann Smith via the API."""
    data = {
        "firstName": "Ann",
        "lastName": "Smith",
        "nickname": "Annie",
        "dob": "1990-04-12",
        "phones": [{"type": "Mobile", "number": "555-0100"}],
        "emails": [{"type": "Work", "address": "ann@example.com"}],
    }
    resp = await client.post("/api/contacts", json=data)
    assert resp.status_code == 201
    return resp.json()
