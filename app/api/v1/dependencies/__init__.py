"""FastAPI dependencies: service accessors and auth guards."""

from .auth import (
    CurrentSubject,
    SuperAdmin,
    get_current_subject_id,
    require_super_admin,
)
from .services import (
    Services,
    get_access_service,
    get_branch_inspector,
    get_lifecycle_service,
    get_provisioning_service,
    get_request_tenant_id,
    get_services,
    get_settings_service,
    get_tenant_directory,
)

__all__ = [
    "CurrentSubject",
    "Services",
    "SuperAdmin",
    "get_access_service",
    "get_branch_inspector",
    "get_current_subject_id",
    "get_lifecycle_service",
    "get_provisioning_service",
    "get_request_tenant_id",
    "get_services",
    "get_settings_service",
    "get_tenant_directory",
    "require_super_admin",
]
