"""Base repository: primary-key lookup, create/update and lifecycle hooks."""

from typing import Any, Generic, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with get_by_pk, create, update and hooks.

    Subclasses override _on_after_create and _on_after_update for cache
    invalidation. Repositories never commit; the caller owns the
    transaction (ConnectionHandle.transaction()).
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def get_by_pk(self, *pk: Any) -> ModelType | None:
        """Return a single record by (possibly composite) primary key, or None."""
        identity = pk[0] if len(pk) == 1 else tuple(pk)
        return await self.db.get(self.model, identity)

    async def create(self, obj: ModelType) -> ModelType:
        """Persist a new record and run _on_after_create hook."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        await self._on_after_create(obj)
        return obj

    async def update(self, obj: ModelType) -> ModelType:
        """Flush changes on an attached record and run _on_after_update hook."""
        await self.db.flush()
        await self.db.refresh(obj)
        await self._on_after_update(obj)
        return obj

    async def _on_after_create(self, obj: ModelType) -> None:
        """Override in subclasses to invalidate caches."""

    async def _on_after_update(self, obj: ModelType) -> None:
        """Override in subclasses to invalidate caches."""
