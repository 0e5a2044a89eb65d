"""SQLAlchemy mixins for common model patterns (DRY).

Provides: TimestampMixin, CreatedAtMixin, TenantScopedMixin.

Tenant-scoped rows may live on a different database than the tenant
directory (a branch), so tenant_id is a plain integer column, not a
foreign key.
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer
from sqlalchemy.orm import Mapped, declared_attr, mapped_column
from sqlalchemy.sql import func


class CreatedAtMixin:
    """Mixin for created_at (server default, timezone-aware)."""

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        )


class TimestampMixin(CreatedAtMixin):
    """Mixin for created_at and updated_at (server defaults, timezone-aware)."""

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        )


class TenantScopedMixin:
    """Mixin for rows owned by a tenant. Defaults to the primary tenant (0)."""

    @declared_attr
    def tenant_id(cls) -> Mapped[int]:
        return mapped_column(Integer, nullable=False, default=0, server_default="0")
