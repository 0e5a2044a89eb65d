"""Tenant deletion and branch teardown."""

from __future__ import annotations

import logging

from app.application.dtos.provisioning import TeardownResult
from app.application.interfaces.services import (
    IAccessService,
    IBranchDirectory,
    IBranchProvider,
    IConnectionRegistry,
    ISchemaEngine,
    ITenantDirectory,
)
from app.core.constants import PRIMARY_TENANT_ID
from app.domain.exceptions import ReservedTenantException
from app.shared.telemetry import add_span_attributes, traced

logger = logging.getLogger(__name__)

NO_MAPPING = "no-mapping"


class TenantLifecycleService:
    """Deletes tenants and tears down their branches.

    The provider delete is best-effort: the durable mapping is removed even
    when the provider call fails, so the tenant stops routing to the branch.
    Pooled connections and schema convergence memory for the endpoint are
    dropped too; a later branch with the same name starts from scratch.
    """

    def __init__(
        self,
        tenants: ITenantDirectory,
        provider: IBranchProvider,
        directory: IBranchDirectory,
        access: IAccessService,
        registry: IConnectionRegistry,
        schema_engine: ISchemaEngine,
    ) -> None:
        self.tenants = tenants
        self.provider = provider
        self.directory = directory
        self.access = access
        self.registry = registry
        self.schema_engine = schema_engine

    @traced("lifecycle.teardown_branch")
    async def teardown_branch(self, tenant_id: int) -> TeardownResult:
        """Delete the tenant's branch database and its mapping.

        Returns a result with reason "no-mapping" when the tenant has no
        durable mapping; nothing is deleted in that case.
        """
        if tenant_id == PRIMARY_TENANT_ID:
            raise ReservedTenantException("torn down")
        mapping = await self.directory.get_mapping(tenant_id)
        if mapping is None:
            logger.info("Teardown tenant %s: no branch mapping", tenant_id)
            return TeardownResult(tenant_id=tenant_id, deleted_branch=False, reason=NO_MAPPING)

        deletion = await self.provider.delete_database(mapping.endpoint)
        if not deletion.ok:
            logger.warning(
                "Teardown tenant %s: provider delete failed: %s", tenant_id, deletion.error
            )
        await self.directory.delete_mapping(tenant_id)
        self.schema_engine.forget(mapping.endpoint)
        await self.registry.release(mapping.endpoint)
        add_span_attributes(tenant_id=tenant_id, status="ok" if deletion.ok else "failed")
        logger.info("Teardown tenant %s: mapping removed", tenant_id)
        return TeardownResult(
            tenant_id=tenant_id,
            deleted_branch=True,
            branch_delete_ok=deletion.ok,
            branch_delete_error=deletion.error,
            endpoint=mapping.endpoint,
        )

    @traced("lifecycle.delete_tenant")
    async def delete_tenant(self, tenant_id: int) -> TeardownResult:
        """Tear down the branch, revoke admin grants and mark the tenant deleted.

        Raises:
            ReservedTenantException: For tenant 0.
            TenantNotFoundException: If the tenant does not exist.
            InvalidTenantTransitionException: If the tenant is already deleted.
        """
        if tenant_id == PRIMARY_TENANT_ID:
            raise ReservedTenantException("deleted")
        await self.tenants.get_tenant(tenant_id)
        result = await self.teardown_branch(tenant_id)
        revoked = await self.access.revoke_tenant(tenant_id)
        await self.tenants.mark_deleted(tenant_id)
        logger.info("Tenant %s deleted (%d admin grant(s) revoked)", tenant_id, revoked)
        return result
