"""Domain enumerations for the sitegrid control plane.

Enums represent fixed sets of domain values (tenant status, forum mode,
provenance tags and provisioning step names).
"""

from enum import Enum


class _ValuesMixin:
    """Adds values() to str enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings (e.g. for CHECK constraints)."""
        return [member.value for member in cls]  # type: ignore[attr-defined]


class TenantStatus(_ValuesMixin, str, Enum):
    """Tenant lifecycle status.

    pending -> active (after provisioning), pending -> rejected,
    pending/active -> deleted. Rejected and deleted are terminal.
    """

    PENDING = "pending"
    ACTIVE = "active"
    REJECTED = "rejected"
    DELETED = "deleted"

    @classmethod
    def claiming(cls) -> tuple["TenantStatus", ...]:
        """Statuses whose tenants hold a claim on their domains."""
        return (cls.PENDING, cls.ACTIVE)


class ForumMode(_ValuesMixin, str, Enum):
    """Whether content operations target the shared dataset or the tenant's own."""

    SHARED = "shared"
    ISOLATED = "isolated"

    @classmethod
    def parse(cls, raw: str | None) -> "ForumMode":
        """Map a stored setting value to a mode.

        "isolated" and the legacy "independent" mean isolated; anything
        else (including missing) means shared.
        """
        value = (raw or "").strip().lower()
        if value in ("isolated", "independent"):
            return cls.ISOLATED
        return cls.SHARED


class MappingSource(_ValuesMixin, str, Enum):
    """Provenance tag stored on a branch mapping."""

    PROVISION = "provision"
    ADMIN = "admin"


class BranchSource(_ValuesMixin, str, Enum):
    """Which resolution source produced a tenant's endpoint."""

    MAPPING = "mapping"
    OVERRIDE = "override"
    STATIC = "static"
    PRIMARY = "primary"


class ResolutionSource(_ValuesMixin, str, Enum):
    """How a hostname was resolved to a tenant id."""

    DESIRED_DOMAIN = "desired_domain"
    FALLBACK_DOMAIN = "fallback_domain"
    DEFAULT = "default"
    DEGRADED = "degraded"


class ProvisionStep(_ValuesMixin, str, Enum):
    """Named steps of the provisioning pipeline, in execution order."""

    BRANCH_NAME = "branch-name"
    CREATE_BRANCH = "create-branch"
    INITIALIZE_SCHEMA = "initialize-schema"
    SEED_CONTENT = "seed-content"
    SEED_SETTINGS = "seed-settings"
    PERSIST_MAPPING = "persist-mapping"
    ACTIVATE_TENANT = "activate-tenant"
    GRANT_ADMIN = "grant-admin"


class SettingType(_ValuesMixin, str, Enum):
    """Display type of a setting (drives the admin form widget)."""

    TEXT = "text"
    TEXTAREA = "textarea"
    IMAGE = "image"
    BOOLEAN = "boolean"
    NUMBER = "number"
