"""Application layer: interfaces (ports), DTOs and orchestration services.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (registry, directory, provider, etc.).
"""

from app.application.interfaces import (
    IAccessService,
    IBranchDirectory,
    IBranchProvider,
    IBranchSeeder,
    IConnectionRegistry,
    IIdentityResolver,
    ISchemaEngine,
    ITenantDirectory,
)

__all__ = [
    "IAccessService",
    "IBranchDirectory",
    "IBranchProvider",
    "IBranchSeeder",
    "IConnectionRegistry",
    "IIdentityResolver",
    "ISchemaEngine",
    "ITenantDirectory",
]
