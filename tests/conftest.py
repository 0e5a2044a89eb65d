"""Pytest configuration and fixtures for sitegrid.

Every test gets its own SQLite files under tmp_path: the primary dataset
plus one file per branch endpoint. Branch endpoints are opaque strings
("db://branch-5") that the injected engine factory maps to files, so the
whole provisioning path runs without a provider or a server database.
"""

import os

# app.main builds the app at import time; these must be set first.
os.environ.setdefault("PRIMARY_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from pathlib import Path  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from app.core.config import Settings, get_settings  # noqa: E402
from app.core.container import ServiceContainer, build_services  # noqa: E402
from app.infrastructure.persistence.schema import PRIMARY_FULL, SET_PRIMARY_FULL  # noqa: E402
from app.infrastructure.security import JwtIdentityResolver  # noqa: E402
from app.main import app as fastapi_app  # noqa: E402
from tests.support import (  # noqa: E402
    FALLBACK_ROOT,
    SUPER_ADMIN,
    TEST_SECRET,
    StubBranchProvider,
    bearer,
    grant_super_admin,
    make_engine_factory,
)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing the primary dataset at a fresh SQLite file."""
    get_settings.cache_clear()
    return Settings(
        primary_database_url=f"sqlite+aiosqlite:///{tmp_path / 'primary.db'}",
        secret_key=TEST_SECRET,
        fallback_root_domain=FALLBACK_ROOT,
        branch_source_database="main-db",
    )


@pytest.fixture
def provider() -> StubBranchProvider:
    return StubBranchProvider()


@pytest.fixture
def identity() -> JwtIdentityResolver:
    return JwtIdentityResolver(TEST_SECRET)


@pytest.fixture
async def services(
    settings: Settings,
    tmp_path: Path,
    provider: StubBranchProvider,
    identity: JwtIdentityResolver,
) -> ServiceContainer:
    """Service graph over the primary dataset, schema converged and tenant 0 seeded."""
    container = build_services(
        settings,
        engine_factory=make_engine_factory(tmp_path),
        provider=provider,
        identity=identity,
    )
    await container.schema_engine.ensure(
        container.registry.primary, PRIMARY_FULL, set_name=SET_PRIMARY_FULL
    )
    await container.settings_service.ensure_defaults(0)
    yield container
    await container.close()


@pytest.fixture
async def admin_headers(
    services: ServiceContainer, identity: JwtIdentityResolver
) -> dict[str, str]:
    """Headers of a super administrator."""
    await grant_super_admin(services)
    return bearer(identity, SUPER_ADMIN)


@pytest.fixture
async def client(services: ServiceContainer) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI).

    ASGITransport does not run the lifespan, so the test container is put
    on app.state directly.
    """
    fastapi_app.state.services = services
    transport = ASGITransport(app=fastapi_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    fastapi_app.state.services = None
