"""Tenant repository (tenant directory on the primary dataset). Returns application DTOs."""

from __future__ import annotations

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.tenant import TenantResult
from app.domain.enums import TenantStatus
from app.domain.exceptions import DomainAlreadyClaimedException
from app.infrastructure.cache.cache_protocol import CacheProtocol
from app.infrastructure.cache.keys import tenant_host_key
from app.infrastructure.persistence.models.tenant import Tenant
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.shared.utils.datetime import ensure_utc

_CLAIMING = [s.value for s in TenantStatus.claiming()]


def _tenant_to_result(t: Tenant) -> TenantResult:
    """Map ORM Tenant to application TenantResult."""
    return TenantResult(
        id=t.id,
        desired_domain=t.desired_domain,
        status=TenantStatus(t.status),
        fallback_domain=t.fallback_domain,
        slug=t.slug,
        owner_subject_id=t.owner_subject_id,
        contact=t.contact,
        rejection_reason=t.rejection_reason,
        created_at=ensure_utc(t.created_at),
    )


class TenantRepository(BaseRepository[Tenant]):
    """Tenant repository. Optional cache: writes invalidate the host keys of the tenant's domains.

    Domain comparisons are case-insensitive; domains are stored lowercased.
    """

    def __init__(
        self,
        db: AsyncSession,
        cache_service: CacheProtocol | None = None,
    ) -> None:
        super().__init__(db, Tenant)
        self.cache = cache_service

    async def get_by_id(self, tenant_id: int) -> TenantResult | None:
        tenant = await self.get_by_pk(tenant_id)
        return _tenant_to_result(tenant) if tenant else None

    async def _find_claiming(self, column, domain: str) -> TenantResult | None:
        result = await self.db.execute(
            select(Tenant)
            .where(func.lower(column) == domain.lower(), Tenant.status.in_(_CLAIMING))
            .order_by(Tenant.id)
            .limit(1)
        )
        tenant = result.scalar_one_or_none()
        return _tenant_to_result(tenant) if tenant else None

    async def find_claiming_by_desired_domain(self, domain: str) -> TenantResult | None:
        """Pending/active tenant whose desired domain equals domain."""
        return await self._find_claiming(Tenant.desired_domain, domain)

    async def find_claiming_by_fallback_domain(self, domain: str) -> TenantResult | None:
        """Pending/active tenant whose fallback domain equals domain."""
        return await self._find_claiming(Tenant.fallback_domain, domain)

    async def find_claiming_by_any_domain(self, domain: str) -> TenantResult | None:
        """Pending/active tenant claiming domain as desired or fallback domain."""
        lowered = domain.lower()
        result = await self.db.execute(
            select(Tenant)
            .where(
                or_(
                    func.lower(Tenant.desired_domain) == lowered,
                    func.lower(Tenant.fallback_domain) == lowered,
                ),
                Tenant.status.in_(_CLAIMING),
            )
            .order_by(Tenant.id)
            .limit(1)
        )
        tenant = result.scalar_one_or_none()
        return _tenant_to_result(tenant) if tenant else None

    async def list_tenants(
        self,
        skip: int = 0,
        limit: int = 100,
        status: TenantStatus | None = None,
    ) -> list[TenantResult]:
        """Tenants newest first, optionally filtered by status."""
        stmt = select(Tenant).order_by(Tenant.id.desc()).offset(skip).limit(limit)
        if status is not None:
            stmt = stmt.where(Tenant.status == status.value)
        result = await self.db.execute(stmt)
        return [_tenant_to_result(t) for t in result.scalars().all()]

    async def used_slugs(self) -> set[str]:
        """Every slug recorded on any tenant, in any status."""
        result = await self.db.execute(select(Tenant.slug).where(Tenant.slug.is_not(None)))
        return {slug.lower() for slug in result.scalars().all()}

    async def create_tenant(
        self,
        desired_domain: str,
        slug: str,
        fallback_domain: str | None,
        owner_subject_id: str | None,
        contact: str | None,
    ) -> TenantResult:
        """Create a pending tenant.

        Raises DomainAlreadyClaimedException when the partial unique indexes
        reject the row (a concurrent claim won the race).
        """
        tenant = Tenant(
            desired_domain=desired_domain.lower(),
            slug=slug,
            fallback_domain=fallback_domain.lower() if fallback_domain else None,
            status=TenantStatus.PENDING.value,
            owner_subject_id=owner_subject_id,
            contact=contact,
        )
        try:
            created = await self.create(tenant)
        except IntegrityError as exc:
            raise DomainAlreadyClaimedException(desired_domain) from exc
        return _tenant_to_result(created)

    async def update_status(
        self,
        tenant_id: int,
        status: TenantStatus,
        rejection_reason: str | None = None,
    ) -> TenantResult | None:
        """Set status (and rejection reason). Transition rules live on TenantEntity."""
        tenant = await self.get_by_pk(tenant_id)
        if tenant is None:
            return None
        tenant.status = status.value
        if rejection_reason is not None:
            tenant.rejection_reason = rejection_reason
        return _tenant_to_result(await self.update(tenant))

    async def update_fallback(
        self, tenant_id: int, slug: str, fallback_domain: str
    ) -> TenantResult | None:
        tenant = await self.get_by_pk(tenant_id)
        if tenant is None:
            return None
        await self._invalidate(tenant)
        tenant.slug = slug
        tenant.fallback_domain = fallback_domain.lower()
        try:
            updated = await self.update(tenant)
        except IntegrityError as exc:
            raise DomainAlreadyClaimedException(fallback_domain) from exc
        return _tenant_to_result(updated)

    async def _invalidate(self, tenant: Tenant) -> None:
        if not (self.cache and self.cache.is_available()):
            return
        for domain in (tenant.desired_domain, tenant.fallback_domain):
            if domain:
                await self.cache.delete(tenant_host_key(domain.lower()))

    async def _on_after_create(self, obj: Tenant) -> None:
        await self._invalidate(obj)

    async def _on_after_update(self, obj: Tenant) -> None:
        await self._invalidate(obj)
