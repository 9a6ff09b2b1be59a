import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from todo_api.main import create_app
from todo_api.models import Base

TEST_DATABASE_URL = "sqlite+aiosqlite://"
SQLITE_OPTIONS = {
    "poolclass": StaticPool,
    "connect_args": {"check_same_thread": False},
}


@pytest.fixture(name="app_factory")
def app_factory_fixture():
    """Build applications that each get their own in-memory database"""
    def make_app():
        return create_app(database_url=TEST_DATABASE_URL, **SQLITE_OPTIONS)
    return make_app


@pytest.fixture(name="app")
def app_fixture(app_factory):
    """An application bound to a fresh in-memory database"""
    return app_factory()


@pytest.fixture(name="client")
def client_fixture(app):
    """Test client with the lifespan running, so todo_table exists"""
    with TestClient(app) as client:
        yield client


@pytest_asyncio.fixture(name="session")
async def session_fixture():
    """Create a fresh in-memory database for each store test."""
    engine = create_async_engine(TEST_DATABASE_URL, **SQLITE_OPTIONS)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session
    await engine.dispose()
