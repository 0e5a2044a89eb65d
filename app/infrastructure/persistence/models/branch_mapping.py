"""BranchMapping ORM model: durable tenant id -> endpoint. Primary dataset."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.domain.enums import MappingSource
from app.infrastructure.persistence.database import Base


class BranchMapping(Base):
    """At most one mapping per tenant (tenant_id is the primary key).

    No foreign key to tenant: mappings may be written administratively
    before a tenant row exists, and the row is removed on teardown.
    """

    __tablename__ = "branch_mapping"

    tenant_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    endpoint: Mapped[str] = mapped_column(Text, nullable=False)
    source: Mapped[str] = mapped_column(
        String, nullable=False, default=MappingSource.PROVISION.value
    )
    updated_by: Mapped[str | None] = mapped_column(String, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
