"""Tenant branch operations: provision, teardown, health, page content reseed."""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.api.v1.dependencies import (
    CurrentSubject,
    Services,
    SuperAdmin,
    get_branch_inspector,
    get_lifecycle_service,
    get_provisioning_service,
)
from app.api.v1.endpoints.tenant_requests import provision_response
from app.application.services import ProvisioningService, TenantLifecycleService
from app.infrastructure.services import BranchInspector
from app.schemas.branch import (
    BranchHealthResponse,
    ProvisionResponse,
    SeedFailureResponse,
    SeedPageContentResponse,
    TeardownResponse,
)

router = APIRouter()


@router.post("/{tenant_id}/provision", response_model=ProvisionResponse)
async def provision_tenant(
    tenant_id: int,
    subject_id: SuperAdmin,
    provisioning: Annotated[ProvisioningService, Depends(get_provisioning_service)],
) -> JSONResponse:
    """Create the tenant's branch, seed it, map it and activate the tenant."""
    result = await provisioning.provision(tenant_id, actor_id=subject_id)
    return provision_response(result)


@router.post("/{tenant_id}/delete-branch", response_model=TeardownResponse)
async def delete_branch(
    tenant_id: int,
    _: SuperAdmin,
    lifecycle: Annotated[TenantLifecycleService, Depends(get_lifecycle_service)],
) -> TeardownResponse:
    """Delete the branch database and mapping; the tenant keeps its status."""
    return TeardownResponse.model_validate(await lifecycle.teardown_branch(tenant_id))


@router.get("/{tenant_id}/branch-health", response_model=BranchHealthResponse)
async def branch_health(
    tenant_id: int,
    _: SuperAdmin,
    inspector: Annotated[BranchInspector, Depends(get_branch_inspector)],
) -> BranchHealthResponse:
    """Tables present on the tenant's dataset versus the baseline."""
    return BranchHealthResponse.model_validate(await inspector.inspect(tenant_id))


@router.post("/{tenant_id}/seed-page-content", response_model=SeedPageContentResponse)
async def seed_page_content(
    tenant_id: int,
    subject_id: CurrentSubject,
    services: Services,
) -> SeedPageContentResponse:
    """Replace the tenant's page content with the demo rows."""
    await services.access.require_tenant_manager(subject_id, tenant_id)
    handle = await services.registry.get_handle(tenant_id)
    failures = await services.seeder.seed_page_content(handle, tenant_id)
    return SeedPageContentResponse(
        ok=not failures,
        failures=[SeedFailureResponse(item=f.item, error=f.error) for f in failures],
    )
