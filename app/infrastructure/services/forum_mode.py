"""Forum-mode strategy: shared forum tables or the tenant's own."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlalchemy import Table

from app.application.services.settings_catalog import FORUM_MODE_KEY
from app.domain.enums import ForumMode
from app.infrastructure.persistence.models import (
    Comment,
    Like,
    Post,
    SharedComment,
    SharedLike,
    SharedPost,
)
from app.infrastructure.persistence.schema import (
    SET_SHARED_FORUM,
    SET_TENANT_FORUM,
    SHARED_FORUM,
    TENANT_FORUM,
)

if TYPE_CHECKING:
    from app.infrastructure.persistence.connection_registry import (
        ConnectionHandle,
        ConnectionRegistry,
    )
    from app.infrastructure.persistence.schema import SchemaEvolutionEngine
    from app.infrastructure.services.settings_service import SettingsService


@dataclass(frozen=True)
class ForumTarget:
    """Where content operations for a tenant read and write."""

    tenant_id: int
    mode: ForumMode
    handle: ConnectionHandle
    posts: Table
    comments: Table
    likes: Table


class ForumModeSelector:
    """Reads social_forum_mode from the merged settings (cached there)."""

    def __init__(
        self,
        settings: SettingsService,
        registry: ConnectionRegistry,
        schema_engine: SchemaEvolutionEngine,
    ) -> None:
        self.settings = settings
        self.registry = registry
        self.schema_engine = schema_engine

    async def mode_for(self, tenant_id: int) -> ForumMode:
        values = await self.settings.resolve(tenant_id)
        return ForumMode.parse(values.get(FORUM_MODE_KEY))

    async def target_for(self, tenant_id: int) -> ForumTarget:
        """Mode plus handle and tables; the forum schema is ensured on the target first."""
        mode = await self.mode_for(tenant_id)
        if mode is ForumMode.ISOLATED:
            handle = await self.registry.get_handle(tenant_id)
            await self.schema_engine.ensure(handle, TENANT_FORUM, set_name=SET_TENANT_FORUM)
            return ForumTarget(
                tenant_id, mode, handle,
                Post.__table__, Comment.__table__, Like.__table__,
            )
        handle = self.registry.primary
        await self.schema_engine.ensure(handle, SHARED_FORUM, set_name=SET_SHARED_FORUM)
        return ForumTarget(
            tenant_id, mode, handle,
            SharedPost.__table__, SharedComment.__table__, SharedLike.__table__,
        )
