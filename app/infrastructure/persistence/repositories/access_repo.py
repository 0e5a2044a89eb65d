"""Access repository: super administrators and tenant-admin grants (primary dataset)."""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.persistence.models.access import AdminUser, TenantAdmin
from app.infrastructure.persistence.repositories.base import BaseRepository


class AccessRepository(BaseRepository[TenantAdmin]):
    """Reads and writes tenant_admin; reads admin_user."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, TenantAdmin)

    async def is_super_admin(self, subject_id: str) -> bool:
        return await self.db.get(AdminUser, subject_id) is not None

    async def can_manage_tenant(self, subject_id: str, tenant_id: int) -> bool:
        return await self.get_by_pk(tenant_id, subject_id) is not None

    async def tenants_for(self, subject_id: str) -> list[int]:
        """Tenant ids the subject administers."""
        result = await self.db.execute(
            select(TenantAdmin.tenant_id)
            .where(TenantAdmin.subject_id == subject_id)
            .order_by(TenantAdmin.tenant_id)
        )
        return list(result.scalars().all())

    async def replace_tenant_admin(self, subject_id: str, tenant_id: int) -> None:
        """Grant tenant_id to subject; a subject administers at most one tenant."""
        await self.db.execute(
            delete(TenantAdmin).where(
                TenantAdmin.subject_id == subject_id, TenantAdmin.tenant_id != tenant_id
            )
        )
        if await self.get_by_pk(tenant_id, subject_id) is None:
            await self.create(TenantAdmin(tenant_id=tenant_id, subject_id=subject_id))

    async def revoke_tenant(self, tenant_id: int) -> int:
        result = await self.db.execute(
            delete(TenantAdmin).where(TenantAdmin.tenant_id == tenant_id)
        )
        return result.rowcount or 0

    async def add_super_admin(self, subject_id: str) -> bool:
        """Record subject as super admin; False when it already was one."""
        if await self.is_super_admin(subject_id):
            return False
        self.db.add(AdminUser(subject_id=subject_id))
        await self.db.flush()
        return True
