"""Access ORM models: super administrators and per-tenant administrators."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import CreatedAtMixin


class AdminUser(CreatedAtMixin, Base):
    """Subject with control-plane (super admin) rights. Table: admin_user."""

    __tablename__ = "admin_user"

    subject_id: Mapped[str] = mapped_column(String, primary_key=True)


class TenantAdmin(CreatedAtMixin, Base):
    """Grant letting a subject administer one tenant. Table: tenant_admin.

    A subject holds at most one grant at a time; the access repository
    replaces older grants when a new one is issued.
    """

    __tablename__ = "tenant_admin"

    tenant_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    subject_id: Mapped[str] = mapped_column(String, primary_key=True, index=True)
