"""Connection registry: live database handles per (tenant id, endpoint).

The registry is an explicitly owned object (built in the app lifespan or
in a test), never a module global. Handles are created lazily and kept until
their endpoint is released; engines are shared between handles that point at
the same endpoint. release() drops one endpoint after its branch is torn
down; dispose_all() closes everything at shutdown.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlalchemy.exc import ArgumentError, NoSuchModuleError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from app.core.constants import PRIMARY_TENANT_ID
from app.domain.exceptions import ConfigurationError
from app.infrastructure.persistence.database import build_engine, build_session_factory
from app.shared.telemetry import add_span_attributes, instrument_engine, traced

if TYPE_CHECKING:
    from app.infrastructure.persistence.branch_directory import BranchDirectory

logger = logging.getLogger(__name__)

EngineFactory = Callable[[str], AsyncEngine]


@dataclass(frozen=True)
class ConnectionHandle:
    """Opaque handle to one tenant's dataset.

    Callers read tenant_id/endpoint and open sessions through session() or
    transaction(); the engine itself stays owned by the registry.
    """

    tenant_id: int
    endpoint: str
    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Plain session (caller commits)."""
        async with self.session_factory() as session:
            yield session

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """Session inside a transaction: commit on success, rollback on error."""
        async with self.session_factory() as session:
            async with session.begin():
                yield session


class ConnectionRegistry:
    """Caches handles keyed by (tenant_id, endpoint).

    get_handle() asks the branch directory for the tenant's endpoint and
    returns the cached handle for that pair, building it on first use.
    Concurrent first access may build twice; the later insert wins and both
    handles are usable.
    """

    def __init__(
        self,
        primary_endpoint: str,
        *,
        engine_factory: EngineFactory | None = None,
        echo: bool = False,
    ) -> None:
        """Initialize the registry.

        Args:
            primary_endpoint: Endpoint of the shared/primary dataset.
            engine_factory: Builds an engine for an endpoint; defaults to
                build_engine. Tests inject one that maps opaque endpoints
                to local SQLite files.
            echo: Echo SQL on engines built by the default factory.
        """
        self.primary_endpoint = primary_endpoint
        self._engine_factory = engine_factory or (
            lambda endpoint: build_engine(endpoint, echo=echo)
        )
        self._engines: dict[str, AsyncEngine] = {}
        self._handles: dict[tuple[int, str], ConnectionHandle] = {}
        self._directory: BranchDirectory | None = None

    def attach_directory(self, directory: BranchDirectory) -> None:
        """Set the branch directory used by get_handle()."""
        self._directory = directory

    @property
    def directory(self) -> BranchDirectory:
        if self._directory is None:
            raise ConfigurationError("Connection registry has no branch directory attached")
        return self._directory

    @property
    def primary(self) -> ConnectionHandle:
        """Handle of the primary dataset (tenant 0)."""
        return self._get_or_create(PRIMARY_TENANT_ID, self.primary_endpoint)

    @traced("connection_registry.get_handle")
    async def get_handle(self, tenant_id: int) -> ConnectionHandle:
        """Return the handle for the tenant's current endpoint.

        Raises:
            ConfigurationError: If the endpoint is empty or cannot be turned
                into an engine (bad URL, unknown driver).
        """
        resolution = await self.directory.endpoint_for(tenant_id)
        add_span_attributes(tenant_id=tenant_id, branch_source=resolution.source.value)
        return self._get_or_create(tenant_id, resolution.endpoint)

    def open_direct(self, tenant_id: int, endpoint: str) -> ConnectionHandle:
        """Handle for an explicit endpoint, not recorded under (tenant_id, endpoint).

        Used by provisioning before the tenant's mapping exists. The engine
        is shared with later get_handle() calls for the same endpoint.
        """
        engine = self._engine_for(endpoint)
        return ConnectionHandle(
            tenant_id=tenant_id,
            endpoint=endpoint,
            engine=engine,
            session_factory=build_session_factory(engine),
        )

    def cached_keys(self) -> list[tuple[int, str]]:
        """Snapshot of cached (tenant_id, endpoint) keys."""
        return list(self._handles)

    def _get_or_create(self, tenant_id: int, endpoint: str) -> ConnectionHandle:
        key = (tenant_id, endpoint)
        handle = self._handles.get(key)
        if handle is not None:
            return handle
        handle = self.open_direct(tenant_id, endpoint)
        self._handles[key] = handle
        logger.info("Connection handle created for tenant %s", tenant_id)
        return handle

    def _engine_for(self, endpoint: str) -> AsyncEngine:
        if not endpoint or not endpoint.strip():
            raise ConfigurationError(
                "Database endpoint is not configured", setting="primary_database_url"
            )
        engine = self._engines.get(endpoint)
        if engine is not None:
            return engine
        try:
            engine = self._engine_factory(endpoint)
        except (ArgumentError, NoSuchModuleError, ImportError) as exc:
            raise ConfigurationError(
                f"Cannot build database engine for endpoint: {exc}"
            ) from exc
        instrument_engine(engine)
        self._engines[endpoint] = engine
        return engine

    async def release(self, endpoint: str) -> int:
        """Forget every handle on endpoint and dispose its engine.

        The primary endpoint is never released. Returns the number of
        handles dropped.
        """
        if endpoint == self.primary_endpoint:
            return 0
        doomed = [key for key in self._handles if key[1] == endpoint]
        for key in doomed:
            del self._handles[key]
        engine = self._engines.pop(endpoint, None)
        if engine is not None:
            await engine.dispose()
            logger.info("Released database engine (%d handle(s))", len(doomed))
        return len(doomed)

    async def dispose_all(self) -> None:
        """Dispose every engine. Call once at process shutdown."""
        engines = list(self._engines.values())
        self._engines.clear()
        self._handles.clear()
        for engine in engines:
            await engine.dispose()
        if engines:
            logger.info("Disposed %d database engine(s)", len(engines))
