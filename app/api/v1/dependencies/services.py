"""Service dependencies (composition root).

Routes receive services built once by the lifespan (app.state.services);
nothing here constructs repositories or engines per request.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from app.application.services import ProvisioningService, TenantLifecycleService
from app.core.constants import PRIMARY_TENANT_ID
from app.core.container import ServiceContainer
from app.domain.exceptions import ConfigurationError
from app.infrastructure.services import (
    AccessService,
    BranchInspector,
    SettingsService,
    TenantDirectoryService,
)


def get_services(request: Request) -> ServiceContainer:
    """Service container built at startup."""
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise ConfigurationError("Services are not initialized")
    return services


Services = Annotated[ServiceContainer, Depends(get_services)]


def get_request_tenant_id(request: Request) -> int:
    """Tenant id resolved from the Host header by TenantResolutionMiddleware."""
    return getattr(request.state, "tenant_id", PRIMARY_TENANT_ID)


def get_tenant_directory(services: Services) -> TenantDirectoryService:
    return services.tenant_directory


def get_settings_service(services: Services) -> SettingsService:
    return services.settings_service


def get_access_service(services: Services) -> AccessService:
    return services.access


def get_provisioning_service(services: Services) -> ProvisioningService:
    return services.provisioning


def get_lifecycle_service(services: Services) -> TenantLifecycleService:
    return services.lifecycle


def get_branch_inspector(services: Services) -> BranchInspector:
    return services.inspector
