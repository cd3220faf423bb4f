from __future__ import annotations

import os
from collections.abc import AsyncIterator

# Cheap hashes keep the suite fast; production uses the default cost of 12
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker  # noqa: E402
from src.api.deps import get_db_session  # noqa: E402
from src.api.main import app  # noqa: E402
from src.domain import Session  # noqa: E402
from src.infrastructure.db import Base, build_engine, build_session_factory  # noqa: E402
from src.infrastructure.db.models import UserModel  # noqa: E402

from tests.utils import register_user  # noqa: E402


@pytest.fixture()
async def session_factory() -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    """Fresh in-memory database per test."""
    engine = build_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield build_session_factory(engine)

    await engine.dispose()


@pytest.fixture()
async def db(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    """Provide a database session for tests that call services directly."""
    async with session_factory() as session:
        yield session


@pytest.fixture()
async def async_client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncClient]:
    """Async HTTP client bound to the app with the test database."""

    async def override_db_session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_db_session
    transport = ASGITransport(app=app)  # type: ignore[arg-type]
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.pop(get_db_session, None)


@pytest.fixture()
def user_payload() -> dict:
    return {
        "firstName": "Ada",
        "lastName": "Lovelace",
        "email": "Ada@Example.com",
        "password": "analytical42",
    }


@pytest.fixture()
async def auth_headers(async_client: AsyncClient, user_payload: dict) -> dict[str, str]:
    """Bearer headers for a freshly registered user."""
    return await register_user(async_client, user_payload)


@pytest.fixture()
async def other_auth_headers(async_client: AsyncClient) -> dict[str, str]:
    """Bearer headers for a second, unrelated user."""
    return await register_user(
        async_client,
        {
            "firstName": "Grace",
            "lastName": "Hopper",
            "email": "grace@example.com",
            "password": "cobol1959",
        },
    )


async def _insert_user(db: AsyncSession, first_name: str, email: str) -> Session:
    user = UserModel(
        first_name=first_name,
        last_name="Tester",
        email=email,
        hashed_password="not-a-real-hash",
    )
    db.add(user)
    await db.commit()
    return Session(user_id=user.id, name=f"{first_name} Tester", email=email)


@pytest.fixture()
async def owner(db: AsyncSession) -> Session:
    """Session for a user stored directly, for service-level tests."""
    return await _insert_user(db, "Owner", "owner@example.com")


@pytest.fixture()
async def stranger(db: AsyncSession) -> Session:
    return await _insert_user(db, "Stranger", "stranger@example.com")
