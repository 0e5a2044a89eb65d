"""Branch routing and provisioning API schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.application.dtos.provisioning import ProvisionResult


class BranchMappingUpsert(BaseModel):
    """Request body for POST /branches (durable mapping, source=admin)."""

    tenant_id: int = Field(..., gt=0)
    endpoint: str = Field(..., min_length=1)


class BranchOverrideSet(BaseModel):
    """Request body for POST /branches/overrides (process-local)."""

    tenant_id: int = Field(..., gt=0)
    endpoint: str = Field(..., min_length=1)


class BranchMappingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    tenant_id: int
    endpoint: str
    source: str
    updated_by: str | None = None
    updated_at: datetime | None = None


class BranchOverviewResponse(BaseModel):
    """Durable mappings, runtime overrides and the configured static map."""

    mappings: list[BranchMappingResponse]
    overrides: dict[int, str]
    static_map: dict[int, str]


class OverrideListResponse(BaseModel):
    overrides: dict[int, str]


class DeletedResponse(BaseModel):
    deleted: bool


class BranchHealthResponse(BaseModel):
    """Table inventory of a tenant's dataset."""

    model_config = ConfigDict(from_attributes=True)

    tenant_id: int
    endpoint: str
    passed: bool
    tables: list[str]
    missing: list[str]
    extra: list[str]
    error: str | None = None


class StepResponse(BaseModel):
    name: str
    ok: bool
    skipped: bool = False
    error: str | None = None
    details: dict[str, Any] = Field(default_factory=dict)


class SeedFailureResponse(BaseModel):
    item: str
    error: str


class ProvisionResponse(BaseModel):
    """Outcome of POST /tenants/{id}/provision (and the approve alias)."""

    ok: bool
    tenant_id: int
    branch_name: str
    endpoint: str | None = None
    failed_step: str | None = None
    error: str | None = None
    steps: list[StepResponse]
    seed_failures: list[SeedFailureResponse]

    @classmethod
    def from_result(cls, result: ProvisionResult) -> "ProvisionResponse":
        return cls(
            ok=result.ok,
            tenant_id=result.tenant_id,
            branch_name=result.branch_name,
            endpoint=result.endpoint,
            failed_step=result.failed_step.value if result.failed_step else None,
            error=result.error,
            steps=[StepResponse(**step.to_dict()) for step in result.steps],
            seed_failures=[
                SeedFailureResponse(item=f.item, error=f.error) for f in result.seed_failures
            ],
        )


class TeardownResponse(BaseModel):
    """Outcome of branch teardown or tenant deletion."""

    model_config = ConfigDict(from_attributes=True)

    tenant_id: int
    deleted_branch: bool
    branch_delete_ok: bool = False
    branch_delete_error: str | None = None
    endpoint: str | None = None
    reason: str | None = None


class SeedPageContentResponse(BaseModel):
    ok: bool
    failures: list[SeedFailureResponse]
