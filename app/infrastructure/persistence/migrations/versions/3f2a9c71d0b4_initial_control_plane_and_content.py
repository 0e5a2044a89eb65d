"""Initial schema: tenant directory, routing, access, settings, content, shared forum

Revision ID: 3f2a9c71d0b4
Revises:
Create Date: 2026-10-19 10:12:41.503118

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f2a9c71d0b4"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_CLAIMING = sa.text("status IN ('pending', 'active')")


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        server_default=sa.func.now(),
        nullable=False,
    )


def _updated_at() -> sa.Column:
    return sa.Column(
        "updated_at",
        sa.DateTime(timezone=True),
        server_default=sa.func.now(),
        nullable=False,
    )


def _tenant_id() -> sa.Column:
    return sa.Column("tenant_id", sa.Integer(), server_default="0", nullable=False)


def _forum_tables(prefix: str, tenant_scoped: bool) -> None:
    """profiles/posts/comments/likes, with or without tenant_id."""
    scoped = [_tenant_id()] if tenant_scoped else []
    op.create_table(
        f"{prefix}profiles",
        *scoped,
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("username", sa.String(), nullable=True),
        sa.Column("avatar_url", sa.Text(), nullable=True),
        sa.Column("uid", sa.String(), nullable=True),
        *(
            [sa.Column("points", sa.Integer(), server_default="0", nullable=False)]
            if tenant_scoped
            else []
        ),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    scoped = [_tenant_id()] if tenant_scoped else []
    op.create_table(
        f"{prefix}posts",
        *scoped,
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("author_id", sa.String(), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("images", sa.JSON(), nullable=False),
        sa.Column("is_ad", sa.Boolean(), nullable=False),
        sa.Column("is_pinned", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        _created_at(),
        _updated_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        f"{prefix}comments",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("post_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        f"{prefix}likes",
        sa.Column("post_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.PrimaryKeyConstraint("post_id", "user_id"),
    )


def upgrade() -> None:
    """Create the primary dataset schema."""
    op.create_table(
        "tenant",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("desired_domain", sa.String(length=253), nullable=False),
        sa.Column("fallback_domain", sa.String(length=253), nullable=True),
        sa.Column("slug", sa.String(length=63), nullable=True),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("owner_subject_id", sa.String(), nullable=True),
        sa.Column("contact", sa.String(), nullable=True),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        _created_at(),
        _updated_at(),
        sa.CheckConstraint(
            "status IN ('pending', 'active', 'rejected', 'deleted')",
            name="tenant_status_check",
        ),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )
    op.create_index(op.f("ix_tenant_desired_domain"), "tenant", ["desired_domain"])
    op.create_index(op.f("ix_tenant_fallback_domain"), "tenant", ["fallback_domain"])
    op.create_index(op.f("ix_tenant_status"), "tenant", ["status"])
    op.create_index(op.f("ix_tenant_owner_subject_id"), "tenant", ["owner_subject_id"])
    op.create_index(
        "uq_tenant_desired_domain_claiming",
        "tenant",
        ["desired_domain"],
        unique=True,
        postgresql_where=_CLAIMING,
        sqlite_where=_CLAIMING,
    )
    op.create_index(
        "uq_tenant_fallback_domain_claiming",
        "tenant",
        ["fallback_domain"],
        unique=True,
        postgresql_where=_CLAIMING,
        sqlite_where=_CLAIMING,
    )

    op.create_table(
        "branch_mapping",
        sa.Column("tenant_id", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("endpoint", sa.Text(), nullable=False),
        sa.Column("source", sa.String(), nullable=False),
        sa.Column("updated_by", sa.String(), nullable=True),
        _updated_at(),
        sa.PrimaryKeyConstraint("tenant_id"),
    )

    op.create_table(
        "admin_user",
        sa.Column("subject_id", sa.String(), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("subject_id"),
    )
    op.create_table(
        "tenant_admin",
        sa.Column("tenant_id", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("subject_id", sa.String(), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("tenant_id", "subject_id"),
    )
    op.create_index(op.f("ix_tenant_admin_subject_id"), "tenant_admin", ["subject_id"])

    op.create_table(
        "app_settings",
        sa.Column("tenant_id", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("key", sa.String(), nullable=False),
        sa.Column("value", sa.Text(), nullable=True),
        sa.Column("name", sa.String(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("type", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("tenant_id", "key"),
    )

    # Tenant-scoped content (tenant 0 and tenants without a branch)
    _forum_tables("", tenant_scoped=True)
    op.create_index("idx_profiles_uid", "profiles", ["uid"], unique=True)
    op.create_index(
        "idx_posts_tenant_status_ad_pin_created",
        "posts",
        ["tenant_id", "status", "is_ad", "is_pinned", "created_at"],
    )
    op.create_index("idx_comments_post_created", "comments", ["post_id", "created_at"])
    op.create_index("idx_likes_post", "likes", ["post_id"])

    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("is_read", sa.Boolean(), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_notifications_user_read_created",
        "notifications",
        ["user_id", "is_read", "created_at"],
    )

    op.create_table(
        "page_content",
        _tenant_id(),
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("page", sa.String(), nullable=False),
        sa.Column("section", sa.String(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("content", sa.JSON(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_page_content_scope",
        "page_content",
        ["tenant_id", "page", "section", "position"],
    )

    # Shared forum
    _forum_tables("shared_", tenant_scoped=False)
    op.create_index(
        "idx_shared_posts_status_pin_created",
        "shared_posts",
        ["status", "is_pinned", "created_at"],
    )
    op.create_index(
        "idx_shared_comments_post_created", "shared_comments", ["post_id", "created_at"]
    )
    op.create_index("idx_shared_likes_post", "shared_likes", ["post_id"])


def downgrade() -> None:
    """Drop everything created in upgrade()."""
    for table in (
        "shared_likes",
        "shared_comments",
        "shared_posts",
        "shared_profiles",
        "page_content",
        "notifications",
        "likes",
        "comments",
        "posts",
        "profiles",
        "app_settings",
        "tenant_admin",
        "admin_user",
        "branch_mapping",
        "tenant",
    ):
        op.drop_table(table)
