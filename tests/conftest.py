"""
Pytest configuration and fixtures for testing
"""
import httpx
import pytest
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from auth import get_admin_config
from database import Base, get_db
from main import app
from services.auth_service import AdminConfig

# In-memory SQLite database for testing; StaticPool keeps one shared connection
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_ADMIN = AdminConfig(
    username="admin",
    password="correct-horse-battery",
    session_secret="test-session-secret",
)

ADMIN_LOGIN = {"username": TEST_ADMIN.username, "password": TEST_ADMIN.password}


@pytest.fixture
async def test_engine():
    """
    Fresh in-memory database per test with all tables created.
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        # Import models to ensure they're registered with Base
        import database_models  # noqa: F401
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


@pytest.fixture
async def test_db(session_factory):
    """
    Fixture that provides an isolated AsyncSession for repository tests.
    """
    async with session_factory() as session:
        yield session


@pytest.fixture
async def async_client(session_factory):
    """
    Async HTTP client against the app, with the test database and
    test admin credentials injected through dependency overrides.
    """
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_admin_config] = lambda: TEST_ADMIN

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    # Cleanup: remove dependency overrides
    app.dependency_overrides.clear()


@pytest.fixture
async def admin_client(async_client):
    """
    The same client after a successful admin login (session cookie stored).
    """
    response = await async_client.post("/api/admin/login", json=ADMIN_LOGIN)
    assert response.status_code == 200
    return async_client
