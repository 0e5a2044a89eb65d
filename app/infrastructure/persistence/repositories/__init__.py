"""Persistence repositories. Re-exports for dependency injection."""

from app.infrastructure.persistence.repositories.access_repo import AccessRepository
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.infrastructure.persistence.repositories.branch_mapping_repo import (
    BranchMappingRepository,
)
from app.infrastructure.persistence.repositories.settings_repo import SettingsRepository
from app.infrastructure.persistence.repositories.tenant_repo import TenantRepository

__all__ = [
    "AccessRepository",
    "BaseRepository",
    "BranchMappingRepository",
    "SettingsRepository",
    "TenantRepository",
]
