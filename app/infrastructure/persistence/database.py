"""Persistence: engine construction, session factory, and Base for SQLAlchemy ORM.

Engines are not module globals: the ConnectionRegistry owns one engine per
(tenant, endpoint) and builds it through build_engine(). The primary dataset
is migrated by Alembic; tenant branches are converged by the schema engine.
"""

import logging
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)

# Pool sizing for server databases; SQLite uses SQLAlchemy's defaults.
_POOL_SIZE = 5
_MAX_OVERFLOW = 10
_POOL_RECYCLE_SECONDS = 3600
_COMMAND_TIMEOUT_SECONDS = 30


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy declarative models."""


def build_engine(endpoint: str, *, echo: bool = False) -> AsyncEngine:
    """Create an async engine for a database endpoint (SQLAlchemy URL).

    Connections are opened lazily, so this never touches the network.

    Args:
        endpoint: SQLAlchemy async URL (postgresql+asyncpg://..., sqlite+aiosqlite://...).
        echo: Log SQL statements.

    Returns:
        AsyncEngine bound to the endpoint.

    Raises:
        sqlalchemy.exc.ArgumentError: If the URL cannot be parsed.
        sqlalchemy.exc.NoSuchModuleError: If the dialect/driver is unknown.
    """
    url = make_url(endpoint)
    kwargs: dict[str, Any] = {"echo": echo, "pool_pre_ping": True}
    if url.get_backend_name() == "postgresql":
        kwargs.update(
            pool_size=_POOL_SIZE,
            max_overflow=_MAX_OVERFLOW,
            pool_recycle=_POOL_RECYCLE_SECONDS,
            connect_args={"command_timeout": _COMMAND_TIMEOUT_SECONDS},
        )
    return create_async_engine(url, **kwargs)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory used for every handle (no expiry on commit, no autoflush)."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
