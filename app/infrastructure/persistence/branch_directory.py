"""Branch directory: which endpoint serves a tenant.

Resolution order, first match wins:

1. durable mapping (branch_mapping on the primary dataset)
2. runtime override (process-local, lost on restart)
3. static map from configuration (BRANCH_MAP)
4. the primary endpoint

Tenant 0 always resolves to the primary. A failing durable lookup is
logged and resolution continues with the remaining sources; the returned
BranchResolution carries the error.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from app.application.dtos.branch import BranchMappingResult, BranchResolution
from app.core.constants import PRIMARY_TENANT_ID
from app.domain.enums import BranchSource
from app.domain.exceptions import ReservedTenantException, ValidationException
from app.infrastructure.persistence.repositories.branch_mapping_repo import (
    BranchMappingRepository,
)
from app.shared.telemetry import set_span_error

if TYPE_CHECKING:
    from app.infrastructure.persistence.connection_registry import ConnectionHandle

logger = logging.getLogger(__name__)


class BranchDirectory:
    """Resolves and records tenant -> endpoint routing."""

    def __init__(
        self,
        primary: ConnectionHandle,
        static_map: Mapping[int, str] | None = None,
        *,
        lookup_timeout: float = 3.0,
    ) -> None:
        """Initialize the directory.

        Args:
            primary: Handle of the primary dataset (holds branch_mapping).
            static_map: Deployment-time tenant id -> endpoint fallback.
            lookup_timeout: Seconds before a durable lookup counts as failed.
        """
        self.primary = primary
        self._static: dict[int, str] = dict(static_map or {})
        self._overrides: dict[int, str] = {}
        self.lookup_timeout = lookup_timeout

    @property
    def primary_endpoint(self) -> str:
        return self.primary.endpoint

    async def endpoint_for(self, tenant_id: int) -> BranchResolution:
        """Return the endpoint serving tenant_id and the source that chose it."""
        if tenant_id == PRIMARY_TENANT_ID:
            return BranchResolution(tenant_id, self.primary_endpoint, BranchSource.PRIMARY)

        error: str | None = None
        try:
            mapping = await asyncio.wait_for(
                self.get_mapping(tenant_id), timeout=self.lookup_timeout
            )
        except (SQLAlchemyError, OSError, TimeoutError) as exc:
            error = str(exc) or exc.__class__.__name__
            logger.warning(
                "Branch mapping lookup failed for tenant %s, falling back: %s",
                tenant_id,
                error,
            )
            set_span_error(exc)
            mapping = None
        if mapping is not None:
            return BranchResolution(tenant_id, mapping.endpoint, BranchSource.MAPPING)

        override = self._overrides.get(tenant_id)
        if override:
            return BranchResolution(tenant_id, override, BranchSource.OVERRIDE, error)

        static = self._static.get(tenant_id)
        if static:
            return BranchResolution(tenant_id, static, BranchSource.STATIC, error)

        return BranchResolution(
            tenant_id, self.primary_endpoint, BranchSource.PRIMARY, error
        )

    async def get_mapping(self, tenant_id: int) -> BranchMappingResult | None:
        """Return the durable mapping for tenant_id, or None."""
        async with self.primary.session() as session:
            return await BranchMappingRepository(session).get(tenant_id)

    async def list_mappings(self) -> list[BranchMappingResult]:
        async with self.primary.session() as session:
            return await BranchMappingRepository(session).list_all()

    async def set_mapping(
        self,
        tenant_id: int,
        endpoint: str,
        *,
        source: str,
        updated_by: str | None = None,
    ) -> BranchMappingResult:
        """Insert or overwrite the durable mapping for tenant_id.

        Raises:
            ReservedTenantException: For tenant 0.
            ValidationException: For an empty endpoint.
        """
        self._check_writable(tenant_id, endpoint)
        async with self.primary.transaction() as session:
            mapping = await BranchMappingRepository(session).upsert(
                tenant_id, endpoint, source, updated_by
            )
        logger.info("Branch mapping set for tenant %s (source=%s)", tenant_id, source)
        return mapping

    async def delete_mapping(self, tenant_id: int) -> bool:
        """Delete the durable mapping; True if one existed."""
        async with self.primary.transaction() as session:
            removed = await BranchMappingRepository(session).remove(tenant_id)
        if removed:
            logger.info("Branch mapping deleted for tenant %s", tenant_id)
        return removed

    def set_override(self, tenant_id: int, endpoint: str) -> None:
        """Route tenant_id to endpoint until cleared or process restart."""
        self._check_writable(tenant_id, endpoint)
        self._overrides[tenant_id] = endpoint
        logger.warning("Runtime branch override set for tenant %s", tenant_id)

    def clear_override(self, tenant_id: int) -> bool:
        """Remove the runtime override; True if one existed."""
        removed = self._overrides.pop(tenant_id, None) is not None
        if removed:
            logger.info("Runtime branch override cleared for tenant %s", tenant_id)
        return removed

    def overrides(self) -> dict[int, str]:
        """Snapshot of runtime overrides."""
        return dict(self._overrides)

    def static_map(self) -> dict[int, str]:
        """Snapshot of the configured static map."""
        return dict(self._static)

    @staticmethod
    def _check_writable(tenant_id: int, endpoint: str) -> None:
        if tenant_id == PRIMARY_TENANT_ID:
            raise ReservedTenantException("remapped")
        if tenant_id < 0:
            raise ValidationException("Tenant id must be positive", field="tenant_id")
        if not endpoint or not endpoint.strip():
            raise ValidationException("Endpoint is required", field="endpoint")
