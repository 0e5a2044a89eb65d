"""Tenant domain entity.

Represents the business concept of a tenant (a site), independent of
persistence. Owns the lifecycle rules; repositories persist the outcome.
"""

from dataclasses import dataclass

from app.core.constants import PRIMARY_TENANT_ID
from app.domain.enums import TenantStatus
from app.domain.exceptions import (
    InvalidTenantTransitionException,
    ReservedTenantException,
    ValidationException,
)

_ALLOWED_TRANSITIONS: dict[TenantStatus, frozenset[TenantStatus]] = {
    TenantStatus.PENDING: frozenset(
        {TenantStatus.ACTIVE, TenantStatus.REJECTED, TenantStatus.DELETED}
    ),
    # Re-provisioning an active tenant keeps it active.
    TenantStatus.ACTIVE: frozenset({TenantStatus.ACTIVE, TenantStatus.DELETED}),
    TenantStatus.REJECTED: frozenset({TenantStatus.DELETED}),
    TenantStatus.DELETED: frozenset(),
}


@dataclass
class TenantEntity:
    """Domain entity for a tenant (site).

    Encapsulates the pending/active/rejected/deleted lifecycle. Tenant 0 is
    the primary site and never goes through this lifecycle.
    """

    id: int
    desired_domain: str
    status: TenantStatus
    owner_subject_id: str | None = None
    fallback_domain: str | None = None
    slug: str | None = None
    rejection_reason: str | None = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Validate tenant business rules. Raises ValidationException if invalid."""
        if self.id == PRIMARY_TENANT_ID:
            raise ReservedTenantException("represented as a tenant request")
        if self.id < 0:
            raise ValidationException("Tenant ID must be positive", field="id")
        if not self.desired_domain or not self.desired_domain.strip():
            raise ValidationException("Desired domain is required", field="desired_domain")

    def claims_domains(self) -> bool:
        """Return True while this tenant holds its desired/fallback domains."""
        return self.status in TenantStatus.claiming()

    def can_provision(self) -> bool:
        """Return True when provisioning may run (pending, or re-provision of active)."""
        return self.status in (TenantStatus.PENDING, TenantStatus.ACTIVE)

    def _transition(self, target: TenantStatus) -> None:
        if target not in _ALLOWED_TRANSITIONS[self.status]:
            raise InvalidTenantTransitionException(
                self.id, self.status.value, target.value
            )
        self.status = target

    def activate(self) -> None:
        """Mark the tenant active after provisioning. Idempotent when already active.

        Raises:
            InvalidTenantTransitionException: If rejected or deleted.
        """
        self._transition(TenantStatus.ACTIVE)

    def reject(self, reason: str | None) -> None:
        """Reject a pending request with a reason.

        Raises:
            InvalidTenantTransitionException: If not pending.
        """
        self._transition(TenantStatus.REJECTED)
        self.rejection_reason = reason or ""

    def delete(self) -> None:
        """Mark the tenant deleted (terminal).

        Raises:
            InvalidTenantTransitionException: If already deleted.
        """
        self._transition(TenantStatus.DELETED)
