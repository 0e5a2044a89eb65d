"""Settings store: per-tenant key/value configuration with inheritance.

Tenant 0's rows live on the primary dataset; every other tenant's rows live
on the dataset its handle points at (its branch, or the primary when it has
none). Resolved maps are cached per tenant when a cache is available.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from app.application.dtos.settings import SettingResult, SettingUpdate
from app.application.services.settings_catalog import (
    DEFINITIONS_BY_KEY,
    FORUM_MODE_KEY,
    merge_settings,
    plan_default_backfill,
)
from app.core.constants import PRIMARY_TENANT_ID
from app.domain.enums import ForumMode
from app.domain.exceptions import AuthorizationException, ValidationException
from app.infrastructure.cache.cache_protocol import CacheProtocol
from app.infrastructure.cache.keys import settings_key, settings_pattern
from app.infrastructure.persistence.repositories.settings_repo import SettingsRepository
from app.infrastructure.persistence.schema import SET_SETTINGS_TABLE, SETTINGS_TABLE
from app.shared.telemetry import traced

if TYPE_CHECKING:
    from app.infrastructure.persistence.connection_registry import (
        ConnectionHandle,
        ConnectionRegistry,
    )
    from app.infrastructure.persistence.schema import SchemaEvolutionEngine

logger = logging.getLogger(__name__)


class SettingsService:
    """Resolve, backfill and write tenant settings."""

    def __init__(
        self,
        registry: ConnectionRegistry,
        schema_engine: SchemaEvolutionEngine,
        cache: CacheProtocol | None = None,
        *,
        site_name_placeholder: str = "分站 #{tenant_id}",
        cache_ttl: int = 60,
    ) -> None:
        self.registry = registry
        self.schema_engine = schema_engine
        self.cache = cache
        self.site_name_placeholder = site_name_placeholder
        self.cache_ttl = cache_ttl

    def placeholder_for(self, tenant_id: int) -> str:
        return self.site_name_placeholder.format(tenant_id=tenant_id)

    async def _rows_on(self, handle: ConnectionHandle, tenant_id: int) -> list[SettingResult]:
        await self.schema_engine.ensure(handle, SETTINGS_TABLE, set_name=SET_SETTINGS_TABLE)
        async with handle.session() as session:
            return await SettingsRepository(session).list_for_tenant(tenant_id)

    async def _global_values(self) -> dict[str, str | None]:
        rows = await self._rows_on(self.registry.primary, PRIMARY_TENANT_ID)
        return {row.key: row.value for row in rows}

    @traced("settings.resolve")
    async def resolve(self, tenant_id: int) -> dict[str, str]:
        """Merged key -> value map for tenant_id.

        Non-strict keys inherit tenant 0's value when the tenant has no row;
        strict keys resolve to "" (or the site name placeholder) instead.
        """
        if self.cache and self.cache.is_available():
            cached = await self.cache.get(settings_key(tenant_id))
            if cached is not None:
                return cached

        defaults = await self._global_values()
        if tenant_id == PRIMARY_TENANT_ID:
            tenant_rows = defaults
        else:
            handle = await self.registry.get_handle(tenant_id)
            tenant_rows = {row.key: row.value for row in await self._rows_on(handle, tenant_id)}
        merged = merge_settings(
            tenant_id,
            defaults,
            tenant_rows,
            site_name_placeholder=self.placeholder_for(tenant_id),
        )

        if self.cache and self.cache.is_available():
            await self.cache.set(settings_key(tenant_id), merged, ttl=self.cache_ttl)
        return merged

    async def resolve_primary(self) -> dict[str, str]:
        """Tenant 0's raw values (forum mode defaulted), for the "main" scope."""
        values = {key: value or "" for key, value in (await self._global_values()).items()}
        if not values.get(FORUM_MODE_KEY):
            values[FORUM_MODE_KEY] = ForumMode.SHARED.value
        return values

    async def ensure_defaults_on(
        self, handle: ConnectionHandle, tenant_id: int
    ) -> list[SettingResult]:
        """Backfill catalog keys and metadata for tenant_id on an explicit handle.

        Returns the rows written (empty when already complete).
        """
        existing = await self._rows_on(handle, tenant_id)
        global_values = None
        if tenant_id != PRIMARY_TENANT_ID:
            global_values = await self._global_values()
        updates = plan_default_backfill(
            tenant_id,
            existing,
            site_name_placeholder=self.placeholder_for(tenant_id),
            global_values=global_values,
        )
        if not updates:
            return []
        written = await self.set_values_on(handle, tenant_id, updates)
        logger.info("Backfilled %d setting(s) for tenant %s", len(written), tenant_id)
        return written

    async def ensure_defaults(self, tenant_id: int) -> list[SettingResult]:
        """Backfill defaults on the tenant's current dataset."""
        handle = await self.registry.get_handle(tenant_id)
        return await self.ensure_defaults_on(handle, tenant_id)

    async def set_values_on(
        self,
        handle: ConnectionHandle,
        tenant_id: int,
        updates: Iterable[SettingUpdate],
    ) -> list[SettingResult]:
        """Upsert rows on an explicit handle (one transaction) and drop cached maps."""
        await self.schema_engine.ensure(handle, SETTINGS_TABLE, set_name=SET_SETTINGS_TABLE)
        async with handle.transaction() as session:
            repo = SettingsRepository(session)
            written = [await repo.upsert(tenant_id, update) for update in updates]
        await self.invalidate(tenant_id)
        return written

    async def list_rows(self, tenant_id: int) -> list[SettingResult]:
        """Raw rows of tenant_id after backfilling defaults."""
        handle = await self.registry.get_handle(tenant_id)
        await self.ensure_defaults_on(handle, tenant_id)
        return await self._rows_on(handle, tenant_id)

    @traced("settings.update")
    async def update(
        self,
        tenant_id: int,
        updates: list[SettingUpdate],
        *,
        restrict_to: frozenset[str] | None = None,
    ) -> list[SettingResult]:
        """Write a batch of values for tenant_id.

        Missing display metadata is filled from the catalog.

        Raises:
            ValidationException: For an empty batch or an empty key.
            AuthorizationException: When restrict_to is given and a key is outside it.
        """
        if not updates:
            raise ValidationException("No settings to update", field="updates")
        prepared: list[SettingUpdate] = []
        for update in updates:
            key = update.key.strip()
            if not key:
                raise ValidationException("Setting key is required", field="key")
            if restrict_to is not None and key not in restrict_to:
                raise AuthorizationException(
                    f"Setting '{key}' cannot be changed by a tenant administrator",
                    tenant_id=tenant_id,
                )
            definition = DEFINITIONS_BY_KEY.get(key)
            prepared.append(
                SettingUpdate(
                    key=key,
                    value=update.value,
                    name=update.name or (definition.name if definition else None),
                    description=update.description
                    or (definition.description if definition else None),
                    type=update.type or (definition.type.value if definition else None),
                )
            )
        handle = await self.registry.get_handle(tenant_id)
        return await self.set_values_on(handle, tenant_id, prepared)

    async def delete_key(self, tenant_id: int, key: str) -> bool:
        """Delete one row; the key falls back to inheritance (or its strict value)."""
        handle = await self.registry.get_handle(tenant_id)
        async with handle.transaction() as session:
            removed = await SettingsRepository(session).remove(tenant_id, key)
        await self.invalidate(tenant_id)
        return removed

    async def invalidate(self, tenant_id: int) -> None:
        """Drop cached maps; a tenant-0 write affects every tenant."""
        if not (self.cache and self.cache.is_available()):
            return
        if tenant_id == PRIMARY_TENANT_ID:
            await self.cache.delete_pattern(settings_pattern())
        else:
            await self.cache.delete(settings_key(tenant_id))
