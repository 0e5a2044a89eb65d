"""Service container: the object graph behind the HTTP surface and scripts.

build_services() wires the registry, schema engine, stores and
orchestrators from Settings. The lifespan stores the result on
app.state.services; tests build their own with an engine factory and a
stub branch provider.
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from app.application.interfaces.services import IBranchProvider, IIdentityResolver
from app.application.services import ProvisioningService, TenantLifecycleService
from app.core.config import Settings
from app.infrastructure.cache.cache_protocol import CacheProtocol
from app.infrastructure.external.branch_provider import HttpBranchProvider
from app.infrastructure.persistence.branch_directory import BranchDirectory
from app.infrastructure.persistence.connection_registry import (
    ConnectionRegistry,
    EngineFactory,
)
from app.infrastructure.persistence.routing import build_routing
from app.infrastructure.persistence.schema import (
    BRANCH_BASELINE,
    SET_BRANCH_BASELINE,
    SchemaEvolutionEngine,
)
from app.infrastructure.security import JwtIdentityResolver
from app.infrastructure.services import (
    AccessService,
    BranchInspector,
    BranchSeeder,
    ForumModeSelector,
    SettingsService,
    TenantDirectoryService,
    TenantResolver,
)


@dataclass
class ServiceContainer:
    """Everything a request handler or script needs, built once per process."""

    settings: Settings
    registry: ConnectionRegistry
    schema_engine: SchemaEvolutionEngine
    identity: IIdentityResolver
    provider: IBranchProvider
    tenant_resolver: TenantResolver
    tenant_directory: TenantDirectoryService
    settings_service: SettingsService
    access: AccessService
    forum_modes: ForumModeSelector
    seeder: BranchSeeder
    inspector: BranchInspector
    provisioning: ProvisioningService
    lifecycle: TenantLifecycleService
    cache: CacheProtocol | None = None

    @property
    def branch_directory(self) -> BranchDirectory:
        return self.registry.directory

    async def close(self) -> None:
        """Dispose every engine the registry built."""
        await self.registry.dispose_all()


def build_services(
    settings: Settings,
    *,
    http_client: httpx.AsyncClient | None = None,
    cache: CacheProtocol | None = None,
    engine_factory: EngineFactory | None = None,
    provider: IBranchProvider | None = None,
    identity: IIdentityResolver | None = None,
) -> ServiceContainer:
    """Build the service graph.

    Args:
        settings: Loaded application settings.
        http_client: Shared client for the branch provider; required unless
            provider is given.
        cache: Optional cache for host and settings lookups.
        engine_factory: Overrides how endpoints become engines (tests).
        provider: Overrides the HTTP branch provider (tests, scripts).
        identity: Overrides the JWT identity resolver (tests).

    Raises:
        ValueError: If neither provider nor http_client is supplied.
    """
    if provider is None:
        if http_client is None:
            raise ValueError("http_client is required when no branch provider is given")
        provider = HttpBranchProvider.from_settings(settings, http_client)

    registry = build_routing(settings, engine_factory)
    schema_engine = SchemaEvolutionEngine()
    settings_service = SettingsService(
        registry,
        schema_engine,
        cache,
        site_name_placeholder=settings.site_name_placeholder,
        cache_ttl=settings.cache_ttl_settings,
    )
    tenant_directory = TenantDirectoryService(
        registry, cache, fallback_root_domain=settings.fallback_root_domain
    )
    access = AccessService(registry)
    seeder = BranchSeeder(settings_service)

    provisioning = ProvisioningService(
        tenant_directory,
        provider,
        registry,
        registry.directory,
        schema_engine,
        seeder,
        access,
        baseline=BRANCH_BASELINE,
        baseline_set_name=SET_BRANCH_BASELINE,
        source_database=settings.branch_source_database,
        region=settings.branch_region,
    )
    lifecycle = TenantLifecycleService(
        tenant_directory, provider, registry.directory, access, registry, schema_engine
    )

    return ServiceContainer(
        settings=settings,
        registry=registry,
        schema_engine=schema_engine,
        identity=identity or JwtIdentityResolver(settings.secret_key, settings.algorithm),
        provider=provider,
        tenant_resolver=TenantResolver(
            registry,
            cache,
            timeout=settings.tenant_resolve_timeout_seconds,
            cache_ttl=settings.cache_ttl_tenants,
        ),
        tenant_directory=tenant_directory,
        settings_service=settings_service,
        access=access,
        forum_modes=ForumModeSelector(settings_service, registry, schema_engine),
        seeder=seeder,
        inspector=BranchInspector(registry),
        provisioning=provisioning,
        lifecycle=lifecycle,
        cache=cache,
    )
