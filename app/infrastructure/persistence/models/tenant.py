"""Tenant ORM model (the tenant directory). Lives on the primary dataset."""

from sqlalchemy import CheckConstraint, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from app.domain.enums import TenantStatus
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import TimestampMixin

_STATUS_LIST = ", ".join(
    "'{}'".format(v.replace("'", "''")) for v in TenantStatus.values()
)
_CLAIMING_PREDICATE = text(
    "status IN ({})".format(
        ", ".join(f"'{s.value}'" for s in TenantStatus.claiming())
    )
)


class Tenant(TimestampMixin, Base):
    """Tenant request / site. Table: tenant.

    Ids are integers starting at 1 and never reused (tenant 0 is the
    primary site and has no row). Pending and active tenants hold a claim
    on their desired and fallback domains, enforced by partial unique
    indexes.
    """

    __tablename__ = "tenant"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    desired_domain: Mapped[str] = mapped_column(String(253), nullable=False, index=True)
    fallback_domain: Mapped[str | None] = mapped_column(
        String(253), nullable=True, index=True
    )
    slug: Mapped[str | None] = mapped_column(String(63), nullable=True)
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=TenantStatus.PENDING.value, index=True
    )
    owner_subject_id: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    contact: Mapped[str | None] = mapped_column(String, nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint(f"status IN ({_STATUS_LIST})", name="tenant_status_check"),
        Index(
            "uq_tenant_desired_domain_claiming",
            "desired_domain",
            unique=True,
            postgresql_where=_CLAIMING_PREDICATE,
            sqlite_where=_CLAIMING_PREDICATE,
        ),
        Index(
            "uq_tenant_fallback_domain_claiming",
            "fallback_domain",
            unique=True,
            postgresql_where=_CLAIMING_PREDICATE,
            sqlite_where=_CLAIMING_PREDICATE,
        ),
        {"sqlite_autoincrement": True},
    )
