"""Named statement sets.

A set is an ordered tuple of statements converged together. Tables come
before their indexes and before additive column changes; every set is safe
to re-run against a dataset that already has some or all of it.
"""

from sqlalchemy import Boolean, Integer, String, Table, Text

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models import (  # noqa: F401  (registers tables)
    AdminUser,
    AppSetting,
    BranchMapping,
    Comment,
    Like,
    Notification,
    PageContent,
    Post,
    Profile,
    SharedComment,
    SharedLike,
    SharedPost,
    SharedProfile,
    Tenant,
    TenantAdmin,
)
from app.infrastructure.persistence.schema.statements import (
    AddColumn,
    CreateIndex,
    CreateTable,
    SchemaStatement,
)

StatementSet = tuple[SchemaStatement, ...]


def _tables(*names: str) -> list[Table]:
    return [Base.metadata.tables[name] for name in names]


def tables_and_indexes(
    *names: str, columns: tuple[SchemaStatement, ...] = ()
) -> StatementSet:
    """CreateTable for each table, then ``columns``, then CreateIndex per index.

    Additive columns go between the two so an index on a late column is
    created only after the column exists.
    """
    tables = _tables(*names)
    statements: list[SchemaStatement] = [CreateTable(t) for t in tables]
    statements.extend(columns)
    for table in tables:
        statements.extend(
            CreateIndex(index) for index in sorted(table.indexes, key=lambda i: i.name or "")
        )
    return tuple(statements)


BRANCH_REQUIRED_TABLES: frozenset[str] = frozenset(
    {"profiles", "posts", "comments", "likes", "notifications", "app_settings", "page_content"}
)
BRANCH_OPTIONAL_TABLES: frozenset[str] = frozenset(
    {"shop_products", "shop_redemptions", "points_history"}
)

# Columns added after the first branches were created.
_CONTENT_LATE_COLUMNS: tuple[SchemaStatement, ...] = (
    AddColumn("profiles", "uid", String()),
    AddColumn("profiles", "points", Integer(), nullable=False, server_default="0"),
    AddColumn("posts", "is_pinned", Boolean(), nullable=False, server_default="0"),
    AddColumn("posts", "rejection_reason", Text()),
)

BRANCH_BASELINE: StatementSet = tables_and_indexes(
    "profiles",
    "posts",
    "comments",
    "likes",
    "notifications",
    "app_settings",
    "page_content",
    columns=_CONTENT_LATE_COLUMNS,
)

TENANT_FORUM: StatementSet = tables_and_indexes(
    "profiles", "posts", "comments", "likes", columns=_CONTENT_LATE_COLUMNS
)

SHARED_FORUM: StatementSet = tables_and_indexes(
    "shared_profiles", "shared_posts", "shared_comments", "shared_likes"
)

SETTINGS_TABLE: StatementSet = tables_and_indexes("app_settings")

# Tenant directories created before fallback domains existed.
TENANT_DIRECTORY_COLUMNS: tuple[SchemaStatement, ...] = (
    AddColumn("tenant", "fallback_domain", String(253)),
    AddColumn("tenant", "slug", String(63)),
    AddColumn("tenant", "contact", String()),
    AddColumn("tenant", "rejection_reason", Text()),
)

CONTROL_PLANE: StatementSet = tables_and_indexes(
    "tenant",
    "branch_mapping",
    "admin_user",
    "tenant_admin",
    columns=TENANT_DIRECTORY_COLUMNS,
)

# Everything the primary dataset holds: tenant 0 keeps its own content
# tables next to the directory and the shared forum.
PRIMARY_FULL: StatementSet = CONTROL_PLANE + BRANCH_BASELINE + SHARED_FORUM

# Set names used as convergence-cache keys.
SET_BRANCH_BASELINE = "branch-baseline"
SET_TENANT_FORUM = "tenant-forum"
SET_SHARED_FORUM = "shared-forum"
SET_SETTINGS_TABLE = "settings-table"
SET_PRIMARY_FULL = "primary-full"
