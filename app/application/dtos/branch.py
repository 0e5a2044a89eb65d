"""DTOs for branch routing (mappings, overrides, resolution, inspection)."""

from dataclasses import dataclass, field
from datetime import datetime

from app.domain.enums import BranchSource


@dataclass(frozen=True)
class BranchMappingResult:
    """Durable tenant -> endpoint mapping read-model."""

    tenant_id: int
    endpoint: str
    source: str
    updated_by: str | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class BranchResolution:
    """Endpoint chosen for a tenant and which source produced it.

    error is set when the durable lookup failed and resolution fell through
    to the remaining sources.
    """

    tenant_id: int
    endpoint: str
    source: BranchSource
    error: str | None = None

    @property
    def is_primary(self) -> bool:
        return self.source == BranchSource.PRIMARY


@dataclass(frozen=True)
class BranchHealth:
    """Table inventory of a tenant's dataset compared to the baseline."""

    tenant_id: int
    endpoint: str
    tables: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)
    extra: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def passed(self) -> bool:
        return self.error is None and not self.missing
