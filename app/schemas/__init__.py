"""Pydantic request/response schemas for the API."""

from app.schemas.branch import (
    BranchHealthResponse,
    BranchMappingResponse,
    BranchMappingUpsert,
    BranchOverrideSet,
    ProvisionResponse,
    TeardownResponse,
)
from app.schemas.health import HealthResponse, ReadinessResponse
from app.schemas.settings import SettingRowResponse, SettingsMapResponse, SettingsUpsertRequest
from app.schemas.tenant import (
    DomainCheckResponse,
    TenantRejectRequest,
    TenantRequestCreate,
    TenantResolveResponse,
    TenantResponse,
)

__all__ = [
    "BranchHealthResponse",
    "BranchMappingResponse",
    "BranchMappingUpsert",
    "BranchOverrideSet",
    "DomainCheckResponse",
    "HealthResponse",
    "ProvisionResponse",
    "ReadinessResponse",
    "SettingRowResponse",
    "SettingsMapResponse",
    "SettingsUpsertRequest",
    "TeardownResponse",
    "TenantRejectRequest",
    "TenantRequestCreate",
    "TenantResolveResponse",
    "TenantResponse",
]
