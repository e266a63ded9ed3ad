"""
Centralized Test Configuration.
"""

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from trackpay.app.main import app
from trackpay.app.db.session import Database, get_db, get_database, Base

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Event handler to enable foreign keys for SQLite
from sqlalchemy import event
from sqlalchemy.pool import Pool

@event.listens_for(Pool, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable foreign key constraints for SQLite."""
    if 'sqlite' in str(type(dbapi_conn)).lower():
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

test_database = Database(TEST_DATABASE_URL, engine=engine)
TestingSessionLocal = test_database.session_factory


@pytest.fixture(scope="session", autouse=True)
def apply_overrides():
    """Apply overrides once for the session."""

    async def override_get_db():
        async with TestingSessionLocal() as session:
            yield session

    def override_get_database():
        return test_database

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_database] = override_get_database
    yield

    app.dependency_overrides = {}


@pytest.fixture(autouse=True)
async def setup_database():
    """Create tables before each test function and drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def session_factory():
    """Factory for independent sessions (to observe committed state)."""
    return TestingSessionLocal


# Shared session for fixture data creation
@pytest.fixture
async def db_session():
    async with TestingSessionLocal() as session:
        yield session


async def _signup(client, username: str, password: str = "password123"):
    """Sign up a user and return (token, user_id)."""
    response = await client.post("/api/auth/signup", json={
        "username": username,
        "password": password
    })
    assert response.status_code == 201, response.text
    data = response.json()
    return data["token"], data["user"]["id"]


@pytest.fixture
async def user_token(client):
    """First user: (token, user_id)."""
    return await _signup(client, "asha_owner")


@pytest.fixture
async def other_user_token(client):
    """Second user for cross-tenant tests."""
    return await _signup(client, "ravi_owner")


@pytest.fixture
async def customer(client, user_token):
    """Customer "Asha" owned by the first user."""
    token, _ = user_token
    response = await client.post(
        "/api/customers",
        json={"name": "Asha", "phone": "555"},
        headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def make_user(client):
    """Factory fixture: ``await make_user("name")`` -> (token, user_id)."""
    async def _make(username: str, password: str = "password123"):
        return await _signup(client, username, password)
    return _make
