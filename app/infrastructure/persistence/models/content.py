"""Tenant-scoped content models present on every dataset.

profiles, posts, comments, likes, notifications and page_content make up
the baseline schema of a tenant branch. The primary dataset carries the
same tables for tenant 0 and for tenants without a branch. Column sets
shared with the shared-forum tables come from the *Columns mixins.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import (
    CreatedAtMixin,
    TenantScopedMixin,
    TimestampMixin,
)


class ProfileColumns(CreatedAtMixin):
    """Columns of a forum identity profile."""

    id: Mapped[str] = mapped_column(String, primary_key=True)
    username: Mapped[str | None] = mapped_column(String, nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    uid: Mapped[str | None] = mapped_column(String, nullable=True)


class PostColumns(TimestampMixin):
    """Columns of a forum post."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    author_id: Mapped[str] = mapped_column(String, nullable=False)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    images: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    is_ad: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_pinned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default="approved")
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)


class CommentColumns(CreatedAtMixin):
    """Columns of a comment on a post."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(Integer, nullable=False)
    user_id: Mapped[str] = mapped_column(String, nullable=False)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)


class LikeColumns:
    """Columns of a like; one per (post, user)."""

    post_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    user_id: Mapped[str] = mapped_column(String, primary_key=True)


class Profile(TenantScopedMixin, ProfileColumns, Base):
    __tablename__ = "profiles"

    points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (Index("idx_profiles_uid", "uid", unique=True),)


class Post(TenantScopedMixin, PostColumns, Base):
    __tablename__ = "posts"

    __table_args__ = (
        Index(
            "idx_posts_tenant_status_ad_pin_created",
            "tenant_id",
            "status",
            "is_ad",
            "is_pinned",
            "created_at",
        ),
        {"sqlite_autoincrement": True},
    )


class Comment(CommentColumns, Base):
    __tablename__ = "comments"

    __table_args__ = (
        Index("idx_comments_post_created", "post_id", "created_at"),
        {"sqlite_autoincrement": True},
    )


class Like(LikeColumns, Base):
    __tablename__ = "likes"

    __table_args__ = (Index("idx_likes_post", "post_id"),)


class Notification(CreatedAtMixin, Base):
    """Per-user notification."""

    __tablename__ = "notifications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String, nullable=False)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index(
            "idx_notifications_user_read_created", "user_id", "is_read", "created_at"
        ),
        {"sqlite_autoincrement": True},
    )


class PageContent(TenantScopedMixin, Base):
    """Ordered content block of a page section (carousel item, feature card, ...)."""

    __tablename__ = "page_content"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    page: Mapped[str] = mapped_column(String, nullable=False)
    section: Mapped[str] = mapped_column(String, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    content: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, onupdate=func.now()
    )

    __table_args__ = (
        Index("idx_page_content_scope", "tenant_id", "page", "section", "position"),
        {"sqlite_autoincrement": True},
    )
