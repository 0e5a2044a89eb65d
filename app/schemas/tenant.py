"""Tenant request and tenant directory API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.domain.enums import ResolutionSource, TenantStatus


class TenantRequestCreate(BaseModel):
    """Request body for POST /tenant-requests.

    The desired domain is trimmed; the owner is the authenticated subject.
    """

    desired_domain: str = Field(..., min_length=1, max_length=253)
    contact: str | None = Field(default=None, max_length=255)

    @field_validator("desired_domain", mode="before")
    @classmethod
    def strip_domain(cls, v: str) -> str:
        return v.strip() if isinstance(v, str) else v


class TenantRejectRequest(BaseModel):
    """Request body for POST /tenant-requests/{id}/reject."""

    reason: str | None = Field(default=None, max_length=2000)


class TenantResponse(BaseModel):
    """Tenant as returned by the directory endpoints."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    desired_domain: str
    status: TenantStatus
    fallback_domain: str | None = None
    slug: str | None = None
    owner_subject_id: str | None = None
    contact: str | None = None
    rejection_reason: str | None = None
    created_at: datetime | None = None


class DomainCheckResponse(BaseModel):
    """Response for GET /tenant-requests/check-domain."""

    domain: str
    available: bool


class TenantResolveResponse(BaseModel):
    """Response for GET /tenant/resolve."""

    host: str
    tenant_id: int
    source: ResolutionSource
