"""App settings repository (one dataset: primary or a tenant branch)."""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.settings import SettingResult, SettingUpdate
from app.infrastructure.persistence.models.app_setting import AppSetting
from app.infrastructure.persistence.repositories.base import BaseRepository


def _setting_to_result(s: AppSetting) -> SettingResult:
    return SettingResult(
        tenant_id=s.tenant_id,
        key=s.key,
        value=s.value,
        name=s.name,
        description=s.description,
        type=s.type,
    )


class SettingsRepository(BaseRepository[AppSetting]):
    """CRUD for app_settings keyed by (tenant_id, key)."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, AppSetting)

    async def list_for_tenant(self, tenant_id: int) -> list[SettingResult]:
        result = await self.db.execute(
            select(AppSetting)
            .where(AppSetting.tenant_id == tenant_id)
            .order_by(AppSetting.key)
        )
        return [_setting_to_result(s) for s in result.scalars().all()]

    async def get(self, tenant_id: int, key: str) -> SettingResult | None:
        row = await self.get_by_pk(tenant_id, key)
        return _setting_to_result(row) if row else None

    async def upsert(self, tenant_id: int, update: SettingUpdate) -> SettingResult:
        """Insert or update (tenant_id, key). None metadata keeps what is stored."""
        row = await self.get_by_pk(tenant_id, update.key)
        if row is None:
            row = await self.create(
                AppSetting(
                    tenant_id=tenant_id,
                    key=update.key,
                    value=update.value,
                    name=update.name,
                    description=update.description,
                    type=update.type,
                )
            )
            return _setting_to_result(row)
        row.value = update.value
        if update.name is not None:
            row.name = update.name
        if update.description is not None:
            row.description = update.description
        if update.type is not None:
            row.type = update.type
        return _setting_to_result(await self.update(row))

    async def remove(self, tenant_id: int, key: str) -> bool:
        """Delete (tenant_id, key); True if a row was removed."""
        result = await self.db.execute(
            delete(AppSetting).where(
                AppSetting.tenant_id == tenant_id, AppSetting.key == key
            )
        )
        return (result.rowcount or 0) > 0
