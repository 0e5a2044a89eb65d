"""DTOs for tenant directory use cases (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime

from app.domain.enums import ResolutionSource, TenantStatus


@dataclass(frozen=True)
class TenantResult:
    """Tenant read-model (result of get_by_id, register, reject, etc.)."""

    id: int
    desired_domain: str
    status: TenantStatus
    fallback_domain: str | None = None
    slug: str | None = None
    owner_subject_id: str | None = None
    contact: str | None = None
    rejection_reason: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class TenantRegistration:
    """Input for registering a tenant request."""

    desired_domain: str
    owner_subject_id: str | None = None
    contact: str | None = None


@dataclass(frozen=True)
class TenantResolution:
    """Outcome of resolving a hostname to a tenant.

    source tells which branch produced tenant_id: a desired or fallback
    domain match, the default (no match) or degraded (lookup failed, error
    holds the reason). Default and degraded both yield tenant 0.
    """

    host: str
    tenant_id: int
    source: ResolutionSource
    error: str | None = None

    @property
    def matched(self) -> bool:
        return self.source in (
            ResolutionSource.DESIRED_DOMAIN,
            ResolutionSource.FALLBACK_DOMAIN,
        )
