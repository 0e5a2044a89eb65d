"""Shared forum models on the primary dataset.

Used by every tenant whose social_forum_mode is "shared". No tenant_id:
the whole point of these tables is that tenants see the same rows.
"""

from sqlalchemy import Index

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.content import (
    CommentColumns,
    LikeColumns,
    PostColumns,
    ProfileColumns,
)


class SharedProfile(ProfileColumns, Base):
    __tablename__ = "shared_profiles"


class SharedPost(PostColumns, Base):
    __tablename__ = "shared_posts"

    __table_args__ = (
        Index(
            "idx_shared_posts_status_pin_created", "status", "is_pinned", "created_at"
        ),
        {"sqlite_autoincrement": True},
    )


class SharedComment(CommentColumns, Base):
    __tablename__ = "shared_comments"

    __table_args__ = (
        Index("idx_shared_comments_post_created", "post_id", "created_at"),
        {"sqlite_autoincrement": True},
    )


class SharedLike(LikeColumns, Base):
    __tablename__ = "shared_likes"

    __table_args__ = (Index("idx_shared_likes_post", "post_id"),)
