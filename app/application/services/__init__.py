"""Application services: provisioning saga, tenant lifecycle, settings catalog."""

from app.application.services.lifecycle_service import TenantLifecycleService
from app.application.services.provisioning_service import ProvisioningService
from app.application.services.settings_catalog import (
    DEFINITIONS_BY_KEY,
    SETTING_DEFINITIONS,
    STRICT_KEYS,
    TENANT_ADMIN_WRITABLE_KEYS,
    merge_settings,
    plan_default_backfill,
    strict_fallback,
)

__all__ = [
    "DEFINITIONS_BY_KEY",
    "ProvisioningService",
    "SETTING_DEFINITIONS",
    "STRICT_KEYS",
    "TENANT_ADMIN_WRITABLE_KEYS",
    "TenantLifecycleService",
    "merge_settings",
    "plan_default_backfill",
    "strict_fallback",
]
