"""Infrastructure implementations of application service interfaces."""

from app.infrastructure.services.access_service import AccessService
from app.infrastructure.services.branch_inspector import BranchInspector
from app.infrastructure.services.branch_seeder import BranchSeeder
from app.infrastructure.services.forum_mode import ForumModeSelector, ForumTarget
from app.infrastructure.services.settings_service import SettingsService
from app.infrastructure.services.tenant_directory_service import TenantDirectoryService
from app.infrastructure.services.tenant_resolver import TenantResolver

__all__ = [
    "AccessService",
    "BranchInspector",
    "BranchSeeder",
    "ForumModeSelector",
    "ForumTarget",
    "SettingsService",
    "TenantDirectoryService",
    "TenantResolver",
]
