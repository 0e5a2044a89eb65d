"""Branch mapping repository (primary dataset). Returns application DTOs."""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.branch import BranchMappingResult
from app.infrastructure.persistence.models.branch_mapping import BranchMapping
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.shared.utils.datetime import ensure_utc


def _mapping_to_result(m: BranchMapping) -> BranchMappingResult:
    return BranchMappingResult(
        tenant_id=m.tenant_id,
        endpoint=m.endpoint,
        source=m.source,
        updated_by=m.updated_by,
        updated_at=ensure_utc(m.updated_at),
    )


class BranchMappingRepository(BaseRepository[BranchMapping]):
    """CRUD for branch_mapping. One row per tenant id."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, BranchMapping)

    async def get(self, tenant_id: int) -> BranchMappingResult | None:
        mapping = await self.get_by_pk(tenant_id)
        return _mapping_to_result(mapping) if mapping else None

    async def list_all(self) -> list[BranchMappingResult]:
        result = await self.db.execute(
            select(BranchMapping).order_by(BranchMapping.tenant_id)
        )
        return [_mapping_to_result(m) for m in result.scalars().all()]

    async def upsert(
        self,
        tenant_id: int,
        endpoint: str,
        source: str,
        updated_by: str | None,
    ) -> BranchMappingResult:
        """Insert or overwrite the mapping (last writer wins)."""
        mapping = await self.get_by_pk(tenant_id)
        if mapping is None:
            mapping = await self.create(
                BranchMapping(
                    tenant_id=tenant_id,
                    endpoint=endpoint,
                    source=source,
                    updated_by=updated_by,
                )
            )
        else:
            mapping.endpoint = endpoint
            mapping.source = source
            mapping.updated_by = updated_by
            mapping = await self.update(mapping)
        return _mapping_to_result(mapping)

    async def remove(self, tenant_id: int) -> bool:
        """Delete the mapping; True if a row was removed."""
        result = await self.db.execute(
            delete(BranchMapping).where(BranchMapping.tenant_id == tenant_id)
        )
        return (result.rowcount or 0) > 0
