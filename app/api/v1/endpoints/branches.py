"""Branch routing administration (super admin).

Durable mappings live in branch_mapping on the primary dataset; overrides
are process-local and vanish on restart. A routing change drops the
tenant's cached settings map, since it now reads from another dataset.
"""

import logging

from fastapi import APIRouter

from app.api.v1.dependencies import Services, SuperAdmin
from app.domain.enums import MappingSource
from app.domain.exceptions import BranchMappingNotFoundException
from app.schemas.branch import (
    BranchMappingResponse,
    BranchMappingUpsert,
    BranchOverrideSet,
    BranchOverviewResponse,
    DeletedResponse,
    OverrideListResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=BranchOverviewResponse)
async def list_branches(_: SuperAdmin, services: Services) -> BranchOverviewResponse:
    """Durable mappings, runtime overrides and the static map."""
    directory = services.branch_directory
    mappings = await directory.list_mappings()
    return BranchOverviewResponse(
        mappings=[BranchMappingResponse.model_validate(m) for m in mappings],
        overrides=directory.overrides(),
        static_map=directory.static_map(),
    )


@router.post("", response_model=BranchMappingResponse)
async def upsert_mapping(
    body: BranchMappingUpsert,
    subject_id: SuperAdmin,
    services: Services,
) -> BranchMappingResponse:
    """Insert or overwrite a tenant's durable mapping (source=admin)."""
    mapping = await services.branch_directory.set_mapping(
        body.tenant_id,
        body.endpoint.strip(),
        source=MappingSource.ADMIN.value,
        updated_by=subject_id,
    )
    await services.settings_service.invalidate(body.tenant_id)
    return BranchMappingResponse.model_validate(mapping)


@router.delete("/{tenant_id}", response_model=DeletedResponse)
async def delete_mapping(tenant_id: int, _: SuperAdmin, services: Services) -> DeletedResponse:
    """Remove a durable mapping; 404 when the tenant has none."""
    if not await services.branch_directory.delete_mapping(tenant_id):
        raise BranchMappingNotFoundException(tenant_id)
    await services.settings_service.invalidate(tenant_id)
    return DeletedResponse(deleted=True)


@router.get("/overrides", response_model=OverrideListResponse)
async def list_overrides(_: SuperAdmin, services: Services) -> OverrideListResponse:
    return OverrideListResponse(overrides=services.branch_directory.overrides())


@router.post("/overrides", response_model=OverrideListResponse)
async def set_override(
    body: BranchOverrideSet,
    _: SuperAdmin,
    services: Services,
) -> OverrideListResponse:
    """Route a tenant to an endpoint until cleared or restart."""
    services.branch_directory.set_override(body.tenant_id, body.endpoint.strip())
    await services.settings_service.invalidate(body.tenant_id)
    return OverrideListResponse(overrides=services.branch_directory.overrides())


@router.delete("/overrides/{tenant_id}", response_model=DeletedResponse)
async def clear_override(tenant_id: int, _: SuperAdmin, services: Services) -> DeletedResponse:
    removed = services.branch_directory.clear_override(tenant_id)
    if removed:
        await services.settings_service.invalidate(tenant_id)
    return DeletedResponse(deleted=removed)
