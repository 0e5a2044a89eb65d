"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from app.domain.enums import TenantStatus

if TYPE_CHECKING:
    from app.application.dtos.branch import BranchMappingResult
    from app.application.dtos.settings import SettingResult, SettingUpdate
    from app.application.dtos.tenant import TenantResult


class ITenantRepository(Protocol):
    """Protocol for the tenant directory (primary dataset)."""

    async def get_by_id(self, tenant_id: int) -> TenantResult | None:
        """Return tenant by id or None."""

    async def find_claiming_by_desired_domain(self, domain: str) -> TenantResult | None:
        """Return the pending/active tenant whose desired domain equals domain."""

    async def find_claiming_by_fallback_domain(self, domain: str) -> TenantResult | None:
        """Return the pending/active tenant whose fallback domain equals domain."""

    async def list_tenants(self, skip: int = 0, limit: int = 100) -> list[TenantResult]:
        """Return tenants, newest first."""

    async def used_slugs(self) -> set[str]:
        """Return every slug recorded on any tenant (lowercased)."""

    async def create_tenant(
        self,
        desired_domain: str,
        slug: str,
        fallback_domain: str | None,
        owner_subject_id: str | None,
        contact: str | None,
    ) -> TenantResult:
        """Create a pending tenant. Raises DomainAlreadyClaimedException on conflict."""

    async def update_status(
        self,
        tenant_id: int,
        status: TenantStatus,
        rejection_reason: str | None = None,
    ) -> TenantResult | None:
        """Set status (and rejection reason); None when tenant is missing."""

    async def update_fallback(
        self, tenant_id: int, slug: str, fallback_domain: str
    ) -> TenantResult | None:
        """Set slug and fallback domain; None when tenant is missing."""


class IBranchMappingRepository(Protocol):
    """Protocol for durable tenant -> endpoint mappings (primary dataset)."""

    async def get(self, tenant_id: int) -> BranchMappingResult | None:
        """Return the mapping for tenant_id or None."""

    async def list_all(self) -> list[BranchMappingResult]:
        """Return all mappings ordered by tenant id."""

    async def upsert(
        self,
        tenant_id: int,
        endpoint: str,
        source: str,
        updated_by: str | None,
    ) -> BranchMappingResult:
        """Insert or overwrite the mapping for tenant_id."""

    async def remove(self, tenant_id: int) -> bool:
        """Delete the mapping; True if a row was removed."""


class ISettingsRepository(Protocol):
    """Protocol for app_settings rows on one dataset."""

    async def list_for_tenant(self, tenant_id: int) -> list[SettingResult]:
        """Return all rows for tenant_id."""

    async def get(self, tenant_id: int, key: str) -> SettingResult | None:
        """Return one row or None."""

    async def upsert(self, tenant_id: int, update: SettingUpdate) -> SettingResult:
        """Insert or update (tenant_id, key). Last writer wins."""

    async def remove(self, tenant_id: int, key: str) -> bool:
        """Delete (tenant_id, key); True if a row was removed."""


class IAccessRepository(Protocol):
    """Protocol for super-admin and tenant-admin records (primary dataset)."""

    async def is_super_admin(self, subject_id: str) -> bool:
        """Return True if subject is a super administrator."""

    async def can_manage_tenant(self, subject_id: str, tenant_id: int) -> bool:
        """Return True if subject holds the tenant-admin grant for tenant_id."""

    async def replace_tenant_admin(self, subject_id: str, tenant_id: int) -> None:
        """Grant tenant_id to subject and drop any other grant the subject held."""

    async def revoke_tenant(self, tenant_id: int) -> int:
        """Remove every grant on tenant_id; return how many were removed."""
