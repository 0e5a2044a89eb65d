"""Tenant requests: registration, review and deletion of site requests.

Any authenticated subject may request a site; reviewing (approve, reject,
delete) is for super administrators. Approve is an alias of provisioning.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from app.api.v1.dependencies import (
    CurrentSubject,
    SuperAdmin,
    get_access_service,
    get_lifecycle_service,
    get_provisioning_service,
    get_tenant_directory,
)
from app.application.dtos.provisioning import ProvisionResult
from app.application.dtos.tenant import TenantRegistration
from app.application.services import ProvisioningService, TenantLifecycleService
from app.domain.enums import ProvisionStep, TenantStatus
from app.domain.exceptions import ProviderError
from app.infrastructure.services import AccessService, TenantDirectoryService
from app.schemas.branch import ProvisionResponse, TeardownResponse
from app.schemas.tenant import (
    DomainCheckResponse,
    TenantRejectRequest,
    TenantRequestCreate,
    TenantResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

Directory = Annotated[TenantDirectoryService, Depends(get_tenant_directory)]


def provision_response(result: ProvisionResult) -> JSONResponse:
    """200 with the step report.

    Raises:
        ProviderError: When the provider could not create the branch (502,
            the step report goes into the error details).
    """
    report = ProvisionResponse.from_result(result).model_dump()
    if result.failed_step == ProvisionStep.CREATE_BRANCH:
        raise ProviderError(
            ProvisionStep.CREATE_BRANCH.value, result.error or "unknown error", report
        )
    return JSONResponse(status_code=200, content=report)


@router.get("", response_model=list[TenantResponse])
async def list_tenant_requests(
    _: SuperAdmin,
    directory: Directory,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    status: TenantStatus | None = Query(None),
) -> list[TenantResponse]:
    """List tenant requests, newest first."""
    tenants = await directory.list_tenants(skip=skip, limit=limit, status=status)
    return [TenantResponse.model_validate(t) for t in tenants]


@router.get("/check-domain", response_model=DomainCheckResponse)
async def check_domain(
    _: CurrentSubject,
    directory: Directory,
    domain: str = Query(..., min_length=1, max_length=253),
) -> DomainCheckResponse:
    """Whether a domain is free to request."""
    available = await directory.check_domain(domain)
    return DomainCheckResponse(domain=domain.strip().lower(), available=available)


@router.post("", response_model=TenantResponse, status_code=201)
async def create_tenant_request(
    body: TenantRequestCreate,
    subject_id: CurrentSubject,
    directory: Directory,
) -> TenantResponse:
    """Register a pending tenant for the caller's desired domain."""
    tenant = await directory.register(
        TenantRegistration(
            desired_domain=body.desired_domain,
            owner_subject_id=subject_id,
            contact=body.contact,
        )
    )
    return TenantResponse.model_validate(tenant)


@router.get("/{tenant_id}", response_model=TenantResponse)
async def get_tenant_request(
    tenant_id: int,
    subject_id: CurrentSubject,
    directory: Directory,
    access: Annotated[AccessService, Depends(get_access_service)],
) -> TenantResponse:
    """One tenant request; super admins and that tenant's administrator only."""
    await access.require_tenant_manager(subject_id, tenant_id)
    return TenantResponse.model_validate(await directory.get_tenant(tenant_id))


@router.post("/{tenant_id}/approve", response_model=ProvisionResponse)
async def approve_tenant_request(
    tenant_id: int,
    subject_id: SuperAdmin,
    provisioning: Annotated[ProvisioningService, Depends(get_provisioning_service)],
) -> JSONResponse:
    """Approve a request by provisioning its branch."""
    result = await provisioning.provision(tenant_id, actor_id=subject_id)
    return provision_response(result)


@router.post("/{tenant_id}/reject", response_model=TenantResponse)
async def reject_tenant_request(
    tenant_id: int,
    body: TenantRejectRequest,
    _: SuperAdmin,
    directory: Directory,
) -> TenantResponse:
    """Reject a pending request with a reason."""
    return TenantResponse.model_validate(await directory.reject(tenant_id, body.reason))


@router.post("/{tenant_id}/backfill-fallback", response_model=TenantResponse)
async def backfill_fallback(
    tenant_id: int,
    _: SuperAdmin,
    directory: Directory,
) -> TenantResponse:
    """Recompute the generated fallback domain of a tenant."""
    return TenantResponse.model_validate(await directory.backfill_fallback(tenant_id))


@router.delete("/{tenant_id}", response_model=TeardownResponse)
async def delete_tenant_request(
    tenant_id: int,
    _: SuperAdmin,
    lifecycle: Annotated[TenantLifecycleService, Depends(get_lifecycle_service)],
) -> TeardownResponse:
    """Delete the tenant, tearing down its branch first."""
    return TeardownResponse.model_validate(await lifecycle.delete_tenant(tenant_id))
