"""Branch health: compare a tenant dataset's tables with the baseline."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError

from app.application.dtos.branch import BranchHealth
from app.infrastructure.persistence.schema import (
    BRANCH_OPTIONAL_TABLES,
    BRANCH_REQUIRED_TABLES,
)

if TYPE_CHECKING:
    from app.infrastructure.persistence.connection_registry import ConnectionRegistry

logger = logging.getLogger(__name__)


class BranchInspector:
    """Lists tables on the dataset a tenant currently routes to."""

    def __init__(self, registry: ConnectionRegistry) -> None:
        self.registry = registry

    async def inspect(self, tenant_id: int) -> BranchHealth:
        """Report missing baseline tables and unknown extra tables.

        Connection failures are reported in BranchHealth.error, not raised.
        """
        handle = await self.registry.get_handle(tenant_id)
        try:
            async with handle.engine.connect() as conn:
                names = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
        except (SQLAlchemyError, OSError) as exc:
            logger.warning("Branch inspection failed for tenant %s: %s", tenant_id, exc)
            return BranchHealth(tenant_id, handle.endpoint, error=str(exc))

        tables = sorted(n for n in names if not n.startswith("sqlite_"))
        known = BRANCH_REQUIRED_TABLES | BRANCH_OPTIONAL_TABLES
        return BranchHealth(
            tenant_id=tenant_id,
            endpoint=handle.endpoint,
            tables=tables,
            missing=sorted(BRANCH_REQUIRED_TABLES - set(tables)),
            extra=[n for n in tables if n not in known],
        )
