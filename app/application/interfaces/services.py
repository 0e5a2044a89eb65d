"""Service interfaces (ports) for the application layer.

Protocols define the collaborators the provisioning and lifecycle services
orchestrate (DIP). Infrastructure supplies the implementations; tests
supply stubs.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.application.dtos.branch import BranchMappingResult, BranchResolution
    from app.application.dtos.provisioning import BranchCreation, BranchDeletion
    from app.application.dtos.schema import SchemaEnsureResult
    from app.application.dtos.tenant import TenantResult
    from app.domain.exceptions import PartialSeedFailure


class IConnectionHandle(Protocol):
    """Opaque live database handle; callers only read its identity."""

    tenant_id: int
    endpoint: str


class IIdentityResolver(Protocol):
    """Black-box token verification. Yields an opaque subject id."""

    def verify(self, token: str) -> str:
        """Return subject id. Raises AuthenticationException when invalid."""


class IBranchProvider(Protocol):
    """External branch provisioning provider."""

    async def create_branch(
        self, db_name: str, branch_name: str, region: str | None
    ) -> BranchCreation:
        """Create a branch database; never raises for provider-side failures."""

    async def delete_database(self, endpoint: str) -> BranchDeletion:
        """Delete the database behind endpoint; never raises for provider-side failures."""


class IConnectionRegistry(Protocol):
    """Owner of live handles keyed by (tenant id, endpoint)."""

    async def get_handle(self, tenant_id: int) -> IConnectionHandle:
        """Resolve the tenant's endpoint and return the cached or new handle."""

    def open_direct(self, tenant_id: int, endpoint: str) -> IConnectionHandle:
        """Return a handle for an explicit endpoint without consulting the directory."""

    async def release(self, endpoint: str) -> int:
        """Drop the handles and dispose the engine built for endpoint."""


class IBranchDirectory(Protocol):
    """Tenant -> endpoint resolution and durable/override writes."""

    async def endpoint_for(self, tenant_id: int) -> BranchResolution:
        """Resolve mapping, then override, then static map, then primary."""

    async def get_mapping(self, tenant_id: int) -> BranchMappingResult | None:
        """Return the durable mapping only."""

    async def set_mapping(
        self, tenant_id: int, endpoint: str, *, source: str, updated_by: str | None
    ) -> BranchMappingResult:
        """Insert or overwrite the durable mapping."""

    async def delete_mapping(self, tenant_id: int) -> bool:
        """Delete the durable mapping."""


class ISchemaStatement(Protocol):
    """One additive DDL operation, identified by name."""

    name: str


class ISchemaEngine(Protocol):
    """Best-effort additive schema convergence."""

    async def ensure(
        self,
        handle: IConnectionHandle,
        statements: Sequence[ISchemaStatement],
        *,
        set_name: str | None = None,
    ) -> SchemaEnsureResult:
        """Apply each statement independently; failures are logged and collected."""

    def forget(self, endpoint: str) -> None:
        """Drop convergence memory for endpoint."""


class IBranchSeeder(Protocol):
    """Baseline rows for a new branch."""

    async def seed_content(
        self, handle: IConnectionHandle, tenant_id: int
    ) -> list[PartialSeedFailure]:
        """Insert demo profile, welcome post and page content; return failures."""

    async def seed_settings(
        self, handle: IConnectionHandle, tenant_id: int
    ) -> list[PartialSeedFailure]:
        """Insert default settings plus tenant identity; return failures."""


class ITenantDirectory(Protocol):
    """Tenant lookups and status writes used by orchestration."""

    async def get_tenant(self, tenant_id: int) -> TenantResult:
        """Return tenant. Raises TenantNotFoundException."""

    async def activate(self, tenant_id: int) -> TenantResult:
        """Transition to active."""

    async def mark_deleted(self, tenant_id: int) -> TenantResult:
        """Transition to deleted."""


class IAccessService(Protocol):
    """Tenant-admin grants."""

    async def grant_tenant_admin(self, subject_id: str, tenant_id: int) -> None:
        """Make subject the admin of exactly this tenant."""

    async def revoke_tenant(self, tenant_id: int) -> int:
        """Drop all grants on tenant."""
