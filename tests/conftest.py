"""
Pytest configuration and fixtures for Loom tests.

Every test gets its own SQLite database file under tmp_path.
"""

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from loom.database import create_engine, get_session, init_db
from loom.events import EventHub
from loom.main import create_app
from loom.tools import LoomTools


@pytest_asyncio.fixture(scope="function")
async def test_engine(tmp_path):
    """Create a test database engine with all tables."""
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'loom_test.db'}")
    await init_db(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_maker(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture(scope="function")
async def test_session(session_maker):
    """Create a test database session."""
    async with session_maker() as session:
        yield session


@pytest.fixture
def hub():
    return EventHub(queue_size=10, heartbeat_interval=0.05)


@pytest.fixture
def tools(hub, session_maker):
    """Tool layer writing to the test database and publishing on the test hub."""
    return LoomTools(hub, session_factory=session_maker)


@pytest_asyncio.fixture(scope="function")
async def client(session_maker, hub):
    """Create an async test client with test database."""
    app = create_app(session_factory=session_maker)
    app.state.hub = hub

    async def override_get_session():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
