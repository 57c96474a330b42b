"""
Shared pytest configuration for site tests.

Service tests run against an in-memory SQLite database (aiosqlite). Route
tests use TestClient with no DATABASE_URL, so pages serve fallback content
unless a test overrides the session dependency.
"""

import os

# Must be set before the app modules are imported
os.environ["ENV"] = "test"
os.environ.pop("DATABASE_URL", None)
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402
from sqlalchemy.exc import OperationalError  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from aldrich_site.database.db import Base  # noqa: E402
from aldrich_site.database.models import Profile, User  # noqa: E402


@pytest_asyncio.fixture
async def db_session():
    """Create a test database session."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async_session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    # Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session_maker() as session:
        yield session

    # Cleanup
    await engine.dispose()


@pytest_asyncio.fixture
async def make_player(db_session):
    """Factory creating a user with a profile. Returns the user id."""

    async def _make(name, sports=None, skill_level=None, avatar_url=None):
        user = User(email=f"{name.lower().replace(' ', '.')}@example.com", password_hash="x")
        db_session.add(user)
        await db_session.flush()
        db_session.add(
            Profile(
                id=user.id,
                name=name,
                sports=sports,
                skill_level=skill_level,
                avatar_url=avatar_url,
            )
        )
        await db_session.flush()
        return user.id

    return _make


@pytest.fixture
def broken_session():
    """A session whose every query fails, as when the backend is unreachable."""
    session = MagicMock()
    session.execute = AsyncMock(
        side_effect=OperationalError("SELECT 1", {}, Exception("connection refused"))
    )
    return session
