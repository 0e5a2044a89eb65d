"""Persistence models: ORM entities and mixins."""

from app.infrastructure.persistence.models.access import AdminUser, TenantAdmin
from app.infrastructure.persistence.models.app_setting import AppSetting
from app.infrastructure.persistence.models.branch_mapping import BranchMapping
from app.infrastructure.persistence.models.content import (
    Comment,
    Like,
    Notification,
    PageContent,
    Post,
    Profile,
)
from app.infrastructure.persistence.models.mixins import (
    CreatedAtMixin,
    TenantScopedMixin,
    TimestampMixin,
)
from app.infrastructure.persistence.models.shared_forum import (
    SharedComment,
    SharedLike,
    SharedPost,
    SharedProfile,
)
from app.infrastructure.persistence.models.tenant import Tenant

__all__ = [
    "AdminUser",
    "AppSetting",
    "BranchMapping",
    "Comment",
    "CreatedAtMixin",
    "Like",
    "Notification",
    "PageContent",
    "Post",
    "Profile",
    "SharedComment",
    "SharedLike",
    "SharedPost",
    "SharedProfile",
    "Tenant",
    "TenantAdmin",
    "TenantScopedMixin",
    "TimestampMixin",
]
