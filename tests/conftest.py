import os

# Configuration is read at import time, so it has to be in place before app imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["OUTBOX_DISPATCHER_ENABLED"] = "false"
os.environ.pop("REALTIME_GATEWAY_URL", None)

from datetime import datetime, timezone  # noqa: E402
from typing import Any, AsyncGenerator, Awaitable, Callable, Generator  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402
from uuid import uuid4  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.database import Base, get_db  # noqa: E402
from app.dependencies import get_current_user  # noqa: E402
from app.main import app  # noqa: E402
from app.models.api.users import UserResponse  # noqa: E402
from app.repositories.user_repository import UserRepository  # noqa: E402


@pytest.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory database engine with the full schema."""
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
def session_factory(test_engine: AsyncEngine) -> async_sessionmaker:
    """Session factory bound to the test engine."""
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def test_db(
    session_factory: async_sessionmaker,
) -> AsyncGenerator[AsyncSession, None]:
    """Database session for integration tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def make_user(
    test_db: AsyncSession,
) -> Callable[..., Awaitable[UserResponse]]:
    """Factory that registers users in the test database."""

    async def _make_user(name: str = "Ada", email: str = "") -> UserResponse:
        email = email or f"{name.lower()}-{uuid4().hex[:8]}@example.com"
        return await UserRepository(test_db).create_user(name=name, email=email)

    return _make_user


@pytest.fixture
async def mock_db() -> AsyncGenerator[AsyncMock, None]:
    """Create a mock database session for unit tests."""
    mock_session = AsyncMock()
    mock_session.commit = AsyncMock()
    mock_session.rollback = AsyncMock()
    mock_session.close = AsyncMock()
    mock_session.refresh = AsyncMock()
    mock_session.execute = AsyncMock()
    mock_session.add = MagicMock()  # add is sync, not async

    yield mock_session


@pytest.fixture
def principal() -> UserResponse:
    """Authenticated user for router tests."""
    now = datetime.now(timezone.utc)
    return UserResponse(
        id=uuid4(),
        name="Grace",
        email="grace@example.com",
        avatar="",
        headline="Engineer",
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def client() -> Generator[TestClient, Any, None]:
    """Create a test client for the FastAPI app."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def authed_client(principal: UserResponse) -> Generator[TestClient, Any, None]:
    """Test client with the principal and database session overridden."""

    async def override_get_db() -> AsyncGenerator[AsyncMock, None]:
        yield AsyncMock()

    app.dependency_overrides[get_current_user] = lambda: principal
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
