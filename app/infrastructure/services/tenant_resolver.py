"""Tenant resolver: request hostname -> tenant id.

Lookup order is desired domain, then fallback domain, then tenant 0. Only
pending and active tenants claim domains. The resolver never raises: a
storage failure or a lookup slower than the timeout yields tenant 0 with
source DEGRADED, so the shared site stays reachable.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from app.application.dtos.tenant import TenantResolution
from app.core.constants import PRIMARY_TENANT_ID
from app.domain.enums import ResolutionSource
from app.domain.exceptions import ConfigurationError
from app.domain.value_objects.core import strip_port
from app.infrastructure.cache.cache_protocol import CacheProtocol
from app.infrastructure.cache.keys import tenant_host_key
from app.infrastructure.persistence.repositories.tenant_repo import TenantRepository
from app.shared.telemetry import add_span_attributes, set_span_error, traced

if TYPE_CHECKING:
    from app.infrastructure.persistence.connection_registry import ConnectionRegistry

logger = logging.getLogger(__name__)


class TenantResolver:
    """Maps hostnames to tenant ids with an optional cache in front."""

    def __init__(
        self,
        registry: ConnectionRegistry,
        cache: CacheProtocol | None = None,
        *,
        timeout: float = 3.0,
        cache_ttl: int = 1800,
    ) -> None:
        self.registry = registry
        self.cache = cache
        self.timeout = timeout
        self.cache_ttl = cache_ttl

    async def resolve(self, hostname: str | None) -> int:
        """Tenant id serving hostname (0 when unmatched or degraded)."""
        return (await self.resolve_detailed(hostname)).tenant_id

    @traced("tenant_resolver.resolve")
    async def resolve_detailed(self, hostname: str | None) -> TenantResolution:
        host = strip_port(hostname or "").lower()
        add_span_attributes(host=host)
        if not host:
            return TenantResolution(host, PRIMARY_TENANT_ID, ResolutionSource.DEFAULT)

        cache_ready = self.cache is not None and self.cache.is_available()
        if cache_ready:
            cached = await self.cache.get(tenant_host_key(host))
            if cached is not None:
                return TenantResolution(host, cached["tenant_id"], ResolutionSource(cached["source"]))

        try:
            resolution = await asyncio.wait_for(self._lookup(host), timeout=self.timeout)
        except (SQLAlchemyError, OSError, TimeoutError, ConfigurationError) as exc:
            error = str(exc) or exc.__class__.__name__
            logger.warning("Tenant lookup for host %s degraded to tenant 0: %s", host, error)
            set_span_error(exc)
            return TenantResolution(
                host, PRIMARY_TENANT_ID, ResolutionSource.DEGRADED, error
            )

        if cache_ready:
            await self.cache.set(
                tenant_host_key(host),
                {"tenant_id": resolution.tenant_id, "source": resolution.source.value},
                ttl=self.cache_ttl,
            )
        return resolution

    async def _lookup(self, host: str) -> TenantResolution:
        async with self.registry.primary.session() as session:
            repo = TenantRepository(session)
            tenant = await repo.find_claiming_by_desired_domain(host)
            if tenant is not None:
                return TenantResolution(host, tenant.id, ResolutionSource.DESIRED_DOMAIN)
            tenant = await repo.find_claiming_by_fallback_domain(host)
            if tenant is not None:
                return TenantResolution(host, tenant.id, ResolutionSource.FALLBACK_DOMAIN)
        return TenantResolution(host, PRIMARY_TENANT_ID, ResolutionSource.DEFAULT)
