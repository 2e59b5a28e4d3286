"""Shared test configuration and fixtures.

Each test gets a fresh in-memory SQLite database (aiosqlite) and a session
bound to an outer transaction that rolls back after the test. Endpoint
commits only release a savepoint, so the outer rollback still isolates them.
"""

import uuid
from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from app.auth.jwt import create_token_pair
from app.database import Base, get_db, utcnow
from app.main import app
from app.models.user import User

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# ---------------------------------------------------------------------------
# Engine and per-test transactional session
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def test_engine():
    """A private in-memory database with all tables created."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async session wrapped in a transaction that always rolls back."""
    async with test_engine.connect() as connection:
        transaction = await connection.begin()
        session = AsyncSession(
            bind=connection,
            expire_on_commit=False,
            join_transaction_mode="create_savepoint",
        )

        try:
            yield session
        finally:
            await session.close()
            await transaction.rollback()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Provide an httpx AsyncClient wired to use the test DB session."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


async def create_user(
    db_session: AsyncSession,
    is_premium: bool = False,
    is_active: bool = True,
    prefix: str = "cook",
) -> User:
    """Insert a Google-authenticated user directly in the DB."""
    unique = uuid.uuid4().hex[:8]
    user = User(
        email=f"{prefix}-{unique}@test.com",
        name="Test Cook",
        auth_provider="google",
        auth_provider_id=f"google-{unique}",
        is_active=is_active,
        is_premium=is_premium,
        premium_since=utcnow() if is_premium else None,
    )
    db_session.add(user)
    await db_session.flush()
    await db_session.refresh(user)
    return user


def headers_for(user: User) -> dict[str, str]:
    """Authorization headers carrying an access token for ``user``."""
    tokens = create_token_pair(str(user.id))
    return {"Authorization": f"Bearer {tokens['access_token']}"}


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    """A free-tier user."""
    return await create_user(db_session)


@pytest_asyncio.fixture
async def auth_headers(test_user: User) -> dict[str, str]:
    return headers_for(test_user)


@pytest_asyncio.fixture
async def premium_user(db_session: AsyncSession) -> User:
    """A Chef Pro user with an active entitlement."""
    return await create_user(db_session, is_premium=True, prefix="chef")


@pytest_asyncio.fixture
async def premium_headers(premium_user: User) -> dict[str, str]:
    return headers_for(premium_user)
