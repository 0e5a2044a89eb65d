"""Tenant directory: registration and status changes of tenant requests.

Lives on the primary dataset. Lifecycle rules come from TenantEntity; this
service loads the row, applies the transition and persists the outcome.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from app.application.dtos.tenant import TenantRegistration, TenantResult
from app.core.constants import PRIMARY_TENANT_ID
from app.domain.entities.tenant import TenantEntity
from app.domain.enums import TenantStatus
from app.domain.exceptions import (
    ConfigurationError,
    DomainAlreadyClaimedException,
    ReservedTenantException,
    TenantNotFoundException,
    ValidationException,
)
from app.domain.value_objects.core import SiteDomain, slugify_domain
from app.infrastructure.cache.cache_protocol import CacheProtocol
from app.infrastructure.cache.keys import tenant_host_key
from app.infrastructure.persistence.repositories.tenant_repo import TenantRepository
from app.shared.telemetry import traced

if TYPE_CHECKING:
    from app.infrastructure.persistence.connection_registry import ConnectionRegistry

logger = logging.getLogger(__name__)

SLUG_SUFFIX_ATTEMPTS = 5


def _to_entity(tenant: TenantResult) -> TenantEntity:
    return TenantEntity(
        id=tenant.id,
        desired_domain=tenant.desired_domain,
        status=tenant.status,
        owner_subject_id=tenant.owner_subject_id,
        fallback_domain=tenant.fallback_domain,
        slug=tenant.slug,
        rejection_reason=tenant.rejection_reason,
    )


def unique_slug(base: str, used: set[str]) -> str:
    """base, or the first of base-1..base-5 not in used (base when all are taken)."""
    if base not in used:
        return base
    for i in range(1, SLUG_SUFFIX_ATTEMPTS + 1):
        candidate = f"{base}-{i}"
        if candidate not in used:
            return candidate
    return base


class TenantDirectoryService:
    """Registers tenant requests and drives their status."""

    def __init__(
        self,
        registry: ConnectionRegistry,
        cache: CacheProtocol | None = None,
        *,
        fallback_root_domain: str = "",
    ) -> None:
        self.registry = registry
        self.cache = cache
        self.fallback_root_domain = fallback_root_domain.strip().strip(".").lower()

    def _fallback_for(self, slug: str) -> str | None:
        if not self.fallback_root_domain:
            return None
        return f"{slug}.{self.fallback_root_domain}"

    async def _invalidate_hosts(self, *tenants: TenantResult | None) -> None:
        """Drop cached host resolutions once the change is committed."""
        if not (self.cache and self.cache.is_available()):
            return
        for tenant in filter(None, tenants):
            for domain in (tenant.desired_domain, tenant.fallback_domain):
                if domain:
                    await self.cache.delete(tenant_host_key(domain.lower()))

    @traced("tenant_directory.register")
    async def register(self, registration: TenantRegistration) -> TenantResult:
        """Create a pending tenant for a desired domain.

        Raises:
            ValidationException: If the domain is empty or malformed.
            DomainAlreadyClaimedException: If a pending/active tenant holds the
                domain (as desired or fallback domain), or the generated
                fallback domain is taken.
        """
        try:
            domain = SiteDomain(registration.desired_domain)
        except ValueError as exc:
            raise ValidationException(str(exc), field="desired_domain") from exc
        desired = domain.value.lower()

        async with self.registry.primary.transaction() as session:
            repo = TenantRepository(session, self.cache)
            holder = await repo.find_claiming_by_any_domain(desired)
            if holder is not None:
                raise DomainAlreadyClaimedException(desired, holder.id)

            slug = unique_slug(domain.slug(), await repo.used_slugs())
            fallback = self._fallback_for(slug)
            if fallback is not None:
                holder = await repo.find_claiming_by_any_domain(fallback)
                if holder is not None:
                    raise DomainAlreadyClaimedException(fallback, holder.id)

            tenant = await repo.create_tenant(
                desired_domain=desired,
                slug=slug,
                fallback_domain=fallback,
                owner_subject_id=registration.owner_subject_id,
                contact=registration.contact,
            )
        await self._invalidate_hosts(tenant)
        logger.info(
            "Tenant %s registered for %s (fallback=%s)", tenant.id, desired, fallback
        )
        return tenant

    async def check_domain(self, domain: str) -> bool:
        """True when no pending/active tenant claims domain."""
        try:
            host = SiteDomain(domain).value.lower()
        except ValueError as exc:
            raise ValidationException(str(exc), field="domain") from exc
        async with self.registry.primary.session() as session:
            holder = await TenantRepository(session).find_claiming_by_any_domain(host)
        return holder is None

    async def get_tenant(self, tenant_id: int) -> TenantResult:
        """Raises TenantNotFoundException when there is no such tenant."""
        async with self.registry.primary.session() as session:
            tenant = await TenantRepository(session).get_by_id(tenant_id)
        if tenant is None:
            raise TenantNotFoundException(tenant_id)
        return tenant

    async def list_tenants(
        self,
        skip: int = 0,
        limit: int = 100,
        status: TenantStatus | None = None,
    ) -> list[TenantResult]:
        async with self.registry.primary.session() as session:
            return await TenantRepository(session).list_tenants(skip, limit, status)

    async def _transition(
        self,
        tenant_id: int,
        operation: str,
        apply: Callable[[TenantEntity], None],
        rejection_reason: str | None = None,
    ) -> TenantResult:
        if tenant_id == PRIMARY_TENANT_ID:
            raise ReservedTenantException(operation)
        async with self.registry.primary.transaction() as session:
            repo = TenantRepository(session, self.cache)
            current = await repo.get_by_id(tenant_id)
            if current is None:
                raise TenantNotFoundException(tenant_id)
            entity = _to_entity(current)
            apply(entity)
            updated = await repo.update_status(tenant_id, entity.status, rejection_reason)
        await self._invalidate_hosts(current, updated)
        logger.info(
            "Tenant %s %s -> %s", tenant_id, current.status.value, entity.status.value
        )
        return updated

    async def activate(self, tenant_id: int) -> TenantResult:
        """pending/active -> active."""
        return await self._transition(tenant_id, "activated", TenantEntity.activate)

    @traced("tenant_directory.reject")
    async def reject(self, tenant_id: int, reason: str | None) -> TenantResult:
        """pending -> rejected, recording the reason."""
        reason = (reason or "").strip() or None
        return await self._transition(
            tenant_id,
            "rejected",
            lambda entity: entity.reject(reason),
            rejection_reason=reason,
        )

    async def mark_deleted(self, tenant_id: int) -> TenantResult:
        """Any non-deleted status -> deleted."""
        return await self._transition(tenant_id, "deleted", TenantEntity.delete)

    async def backfill_fallback(self, tenant_id: int) -> TenantResult:
        """Recompute the fallback domain, keeping an existing slug.

        Raises:
            ConfigurationError: If no fallback root domain is configured.
        """
        if not self.fallback_root_domain:
            raise ConfigurationError(
                "Fallback root domain is not configured", setting="fallback_root_domain"
            )
        if tenant_id == PRIMARY_TENANT_ID:
            raise ReservedTenantException("given a fallback domain")
        async with self.registry.primary.transaction() as session:
            repo = TenantRepository(session, self.cache)
            tenant = await repo.get_by_id(tenant_id)
            if tenant is None:
                raise TenantNotFoundException(tenant_id)
            slug = tenant.slug or slugify_domain(tenant.desired_domain)
            fallback = self._fallback_for(slug)
            holder = await repo.find_claiming_by_any_domain(fallback)
            if holder is not None and holder.id != tenant_id:
                raise DomainAlreadyClaimedException(fallback, holder.id)
            updated = await repo.update_fallback(tenant_id, slug, fallback)
        await self._invalidate_hosts(tenant, updated)
        logger.info("Tenant %s fallback domain set to %s", tenant_id, fallback)
        return updated
