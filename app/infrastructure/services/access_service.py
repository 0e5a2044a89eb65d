"""Access policy: super administrators and per-tenant administrators."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.core.constants import PRIMARY_TENANT_ID
from app.domain.exceptions import AuthorizationException
from app.infrastructure.persistence.repositories.access_repo import AccessRepository

if TYPE_CHECKING:
    from app.infrastructure.persistence.connection_registry import ConnectionRegistry

logger = logging.getLogger(__name__)


class AccessService:
    """Reads and grants administrative access (tables on the primary dataset)."""

    def __init__(self, registry: ConnectionRegistry) -> None:
        self.registry = registry

    async def is_super_admin(self, subject_id: str) -> bool:
        async with self.registry.primary.session() as session:
            return await AccessRepository(session).is_super_admin(subject_id)

    async def can_manage_tenant(self, subject_id: str, tenant_id: int) -> bool:
        """True for super admins and for the tenant's administrator."""
        async with self.registry.primary.session() as session:
            repo = AccessRepository(session)
            if await repo.is_super_admin(subject_id):
                return True
            if tenant_id == PRIMARY_TENANT_ID:
                return False
            return await repo.can_manage_tenant(subject_id, tenant_id)

    async def managed_tenants(self, subject_id: str) -> list[int]:
        async with self.registry.primary.session() as session:
            return await AccessRepository(session).tenants_for(subject_id)

    async def grant_tenant_admin(self, subject_id: str, tenant_id: int) -> None:
        """Make subject the administrator of tenant_id, dropping any other grant."""
        async with self.registry.primary.transaction() as session:
            await AccessRepository(session).replace_tenant_admin(subject_id, tenant_id)
        logger.info("Subject %s granted admin of tenant %s", subject_id, tenant_id)

    async def revoke_tenant(self, tenant_id: int) -> int:
        async with self.registry.primary.transaction() as session:
            removed = await AccessRepository(session).revoke_tenant(tenant_id)
        if removed:
            logger.info("Revoked %d admin grant(s) on tenant %s", removed, tenant_id)
        return removed

    async def require_super_admin(self, subject_id: str) -> None:
        """Raises AuthorizationException unless subject is a super admin."""
        if not await self.is_super_admin(subject_id):
            raise AuthorizationException("Super administrator access required")

    async def require_tenant_manager(self, subject_id: str, tenant_id: int) -> None:
        """Raises AuthorizationException unless subject may manage tenant_id."""
        if not await self.can_manage_tenant(subject_id, tenant_id):
            raise AuthorizationException(
                "Not an administrator of this tenant", tenant_id=tenant_id
            )
