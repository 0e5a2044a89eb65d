"""Settings administration.

Super admins may write any key of any tenant. Tenant admins may only
write the display keys of the tenant they manage, never tenant 0.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.api.v1.dependencies import CurrentSubject, get_access_service, get_settings_service
from app.application.dtos.settings import SettingUpdate
from app.application.services import TENANT_ADMIN_WRITABLE_KEYS
from app.core.constants import PRIMARY_TENANT_ID
from app.domain.exceptions import AuthorizationException
from app.infrastructure.services import AccessService, SettingsService
from app.schemas.branch import DeletedResponse
from app.schemas.settings import SettingRowResponse, SettingsUpsertRequest

router = APIRouter()

Access = Annotated[AccessService, Depends(get_access_service)]
SettingsSvc = Annotated[SettingsService, Depends(get_settings_service)]


async def _writable_keys(
    access: AccessService, subject_id: str, tenant_id: int
) -> frozenset[str] | None:
    """None for super admins (no restriction), the allowlist for tenant admins."""
    if await access.is_super_admin(subject_id):
        return None
    if tenant_id == PRIMARY_TENANT_ID:
        raise AuthorizationException("Only super administrators may change tenant 0 settings")
    await access.require_tenant_manager(subject_id, tenant_id)
    return TENANT_ADMIN_WRITABLE_KEYS


@router.get("", response_model=list[SettingRowResponse])
async def list_settings(
    subject_id: CurrentSubject,
    access: Access,
    settings_svc: SettingsSvc,
    tenant_id: int = Query(PRIMARY_TENANT_ID, ge=0),
) -> list[SettingRowResponse]:
    """Raw rows of a tenant, defaults backfilled first."""
    await access.require_tenant_manager(subject_id, tenant_id)
    rows = await settings_svc.list_rows(tenant_id)
    return [SettingRowResponse.model_validate(row) for row in rows]


@router.post("", response_model=list[SettingRowResponse])
async def upsert_settings(
    body: SettingsUpsertRequest,
    subject_id: CurrentSubject,
    access: Access,
    settings_svc: SettingsSvc,
) -> list[SettingRowResponse]:
    """Upsert a batch of keys for one tenant."""
    allowed = await _writable_keys(access, subject_id, body.tenant_id)
    written = await settings_svc.update(
        body.tenant_id,
        [
            SettingUpdate(
                key=item.key,
                value=item.value,
                name=item.name,
                description=item.description,
                type=item.type,
            )
            for item in body.settings
        ],
        restrict_to=allowed,
    )
    return [SettingRowResponse.model_validate(row) for row in written]


@router.delete("/{key}", response_model=DeletedResponse)
async def delete_setting(
    key: str,
    subject_id: CurrentSubject,
    access: Access,
    settings_svc: SettingsSvc,
    tenant_id: int = Query(PRIMARY_TENANT_ID, ge=0),
) -> DeletedResponse:
    """Delete one key; it falls back to the inherited (or strict) value."""
    allowed = await _writable_keys(access, subject_id, tenant_id)
    if allowed is not None and key not in allowed:
        raise AuthorizationException(
            f"Setting '{key}' cannot be changed by a tenant administrator", tenant_id=tenant_id
        )
    return DeletedResponse(deleted=await settings_svc.delete_key(tenant_id, key))
