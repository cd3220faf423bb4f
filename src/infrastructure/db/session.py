from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

import pydantic
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool
from src.core.config import get_settings

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def build_engine(url: str, **kwargs: Any) -> AsyncEngine:
    """Create an async engine for ``url``.

    An in-memory SQLite database lives inside a single connection, so it is
    pinned with ``StaticPool``; networked databases get pre-ping checks.
    """
    if url.startswith("sqlite") and ":memory:" in url:
        kwargs.setdefault("poolclass", StaticPool)
    else:
        kwargs.setdefault("pool_pre_ping", True)
    return create_async_engine(url, echo=False, **kwargs)


def migration_database_url(fallback: str | None = None) -> str:
    """Database URL for Alembic, from settings.

    ``fallback`` (the alembic.ini URL) is used only when the settings fail
    validation; any other error propagates.
    """
    try:
        return get_settings().async_database_url
    except pydantic.ValidationError:
        if not fallback:
            raise
        return fallback


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Services read attributes after commit; keep them loaded
    return async_sessionmaker(engine, expire_on_commit=False)


def get_engine() -> AsyncEngine:
    global _engine

    if _engine is None:
        _engine = build_engine(get_settings().async_database_url)
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    global _session_factory

    if _session_factory is None:
        _session_factory = build_session_factory(get_engine())
    return _session_factory


async def get_session() -> AsyncIterator[AsyncSession]:
    session_factory = get_session_factory()
    async with session_factory() as session:
        yield session


async def dispose_engine() -> None:
    """Close pooled connections; called on application shutdown."""
    global _engine, _session_factory

    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None
