"""Schema evolution engine: converge a dataset onto a statement set.

Statements run one at a time, each in its own transaction, so one failure
(missing privilege, an object created concurrently, a dialect that rejects
the DDL) never blocks the rest. Failures are logged and reported in the
result, never raised. A fully applied named set is remembered per endpoint
and skipped on later calls for the life of the engine.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from app.application.dtos.schema import SchemaEnsureResult
from app.infrastructure.persistence.schema.statements import SchemaStatement
from app.shared.telemetry import add_span_attributes, traced

if TYPE_CHECKING:
    from app.infrastructure.persistence.connection_registry import ConnectionHandle

logger = logging.getLogger(__name__)


class SchemaEvolutionEngine:
    """Applies additive DDL best-effort and caches converged (endpoint, set) pairs."""

    def __init__(self) -> None:
        self._converged: set[tuple[str, str]] = set()

    def is_converged(self, endpoint: str, set_name: str) -> bool:
        return (endpoint, set_name) in self._converged

    def forget(self, endpoint: str) -> None:
        """Drop convergence memory for an endpoint (e.g. after its branch is deleted)."""
        self._converged = {key for key in self._converged if key[0] != endpoint}

    @traced("schema_engine.ensure")
    async def ensure(
        self,
        handle: ConnectionHandle,
        statements: Sequence[SchemaStatement],
        *,
        set_name: str | None = None,
    ) -> SchemaEnsureResult:
        """Apply each statement to the handle's dataset.

        Args:
            handle: Target dataset.
            statements: Ordered additive statements.
            set_name: Cache key; when given and already converged for this
                endpoint, nothing runs.

        Returns:
            SchemaEnsureResult with applied and failed statement names.
        """
        add_span_attributes(endpoint=handle.endpoint, statement_set=set_name)
        if set_name and self.is_converged(handle.endpoint, set_name):
            return SchemaEnsureResult(
                endpoint=handle.endpoint, statement_set=set_name, cached=True
            )

        applied: list[str] = []
        failed: dict[str, str] = {}
        for statement in statements:
            try:
                async with handle.engine.begin() as conn:
                    await conn.run_sync(statement.apply)
            except (SQLAlchemyError, OSError) as exc:
                failed[statement.name] = str(exc)
                logger.warning(
                    "Schema statement %s failed on tenant %s: %s",
                    statement.name,
                    handle.tenant_id,
                    exc,
                )
            else:
                applied.append(statement.name)

        if failed:
            logger.warning(
                "Schema set %s on tenant %s: %d applied, %d failed",
                set_name or "<adhoc>",
                handle.tenant_id,
                len(applied),
                len(failed),
            )
        elif set_name:
            self._converged.add((handle.endpoint, set_name))
            logger.debug("Schema set %s converged on tenant %s", set_name, handle.tenant_id)

        return SchemaEnsureResult(
            endpoint=handle.endpoint,
            statement_set=set_name,
            applied=applied,
            failed=failed,
        )
