"""DTOs for tenant settings."""

from dataclasses import dataclass

from app.domain.enums import SettingType


@dataclass(frozen=True)
class SettingDefinition:
    """Catalog entry: canonical default value plus display metadata."""

    key: str
    value: str
    name: str
    description: str
    type: SettingType


@dataclass(frozen=True)
class SettingResult:
    """Stored setting row for one tenant."""

    tenant_id: int
    key: str
    value: str | None
    name: str | None = None
    description: str | None = None
    type: str | None = None


@dataclass(frozen=True)
class SettingUpdate:
    """Upsert input. None metadata leaves the stored metadata unchanged."""

    key: str
    value: str | None
    name: str | None = None
    description: str | None = None
    type: str | None = None
