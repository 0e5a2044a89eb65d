"""AppSetting ORM model: tenant-scoped key/value configuration.

Present on every dataset; tenant 0 rows on the primary hold the canonical
defaults, a branch holds its own tenant's rows.
"""

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base


class AppSetting(Base):
    """Composite key (tenant_id, key). Value and display metadata are text."""

    __tablename__ = "app_settings"

    tenant_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    key: Mapped[str] = mapped_column(String, primary_key=True)
    value: Mapped[str | None] = mapped_column(Text, nullable=True)
    name: Mapped[str | None] = mapped_column(String, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[str | None] = mapped_column(String, nullable=True)
