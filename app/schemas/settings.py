"""Settings API schemas (public merged map and admin row writes)."""

from pydantic import BaseModel, ConfigDict, Field


class SettingItem(BaseModel):
    """One key in an admin upsert batch. Omitted metadata keeps the stored value."""

    key: str = Field(..., min_length=1, max_length=128)
    value: str | None = None
    name: str | None = None
    description: str | None = None
    type: str | None = None


class SettingsUpsertRequest(BaseModel):
    """Request body for POST /admin/settings."""

    tenant_id: int = Field(default=0, ge=0)
    settings: list[SettingItem] = Field(..., min_length=1)


class SettingRowResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    tenant_id: int
    key: str
    value: str | None = None
    name: str | None = None
    description: str | None = None
    type: str | None = None


class SettingsMapResponse(BaseModel):
    """Merged settings for one tenant (GET /settings)."""

    tenant_id: int
    settings: dict[str, str]
