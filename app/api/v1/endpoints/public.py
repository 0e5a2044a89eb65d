"""Public per-request endpoints: which tenant a host is, and its settings."""

from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Query, Request

from app.api.v1.dependencies import get_request_tenant_id, get_settings_service
from app.application.dtos.tenant import TenantResolution
from app.core.constants import PRIMARY_TENANT_ID
from app.domain.enums import ResolutionSource
from app.infrastructure.services import SettingsService
from app.schemas.settings import SettingsMapResponse
from app.schemas.tenant import TenantResolveResponse

router = APIRouter()


@router.get("/tenant/resolve", response_model=TenantResolveResponse)
async def resolve_tenant(request: Request) -> TenantResolveResponse:
    """Tenant serving this request's Host header (0 when unmatched)."""
    resolution: TenantResolution | None = getattr(request.state, "tenant_resolution", None)
    if resolution is None:
        return TenantResolveResponse(
            host=request.headers.get("host", ""),
            tenant_id=get_request_tenant_id(request),
            source=ResolutionSource.DEFAULT,
        )
    return TenantResolveResponse(
        host=resolution.host, tenant_id=resolution.tenant_id, source=resolution.source
    )


@router.get("/settings", response_model=SettingsMapResponse)
async def get_public_settings(
    tenant_id: Annotated[int, Depends(get_request_tenant_id)],
    settings_svc: Annotated[SettingsService, Depends(get_settings_service)],
    scope: Annotated[Literal["tenant", "main"], Query()] = "tenant",
) -> SettingsMapResponse:
    """Merged settings of the request's tenant.

    scope=main returns the primary site's own values regardless of host.
    """
    if scope == "main":
        return SettingsMapResponse(
            tenant_id=PRIMARY_TENANT_ID, settings=await settings_svc.resolve_primary()
        )
    return SettingsMapResponse(tenant_id=tenant_id, settings=await settings_svc.resolve(tenant_id))
