"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from app.infrastructure.
"""

from app.application.interfaces.repositories import (
    IAccessRepository,
    IBranchMappingRepository,
    ISettingsRepository,
    ITenantRepository,
)
from app.application.interfaces.services import (
    IAccessService,
    IBranchDirectory,
    IBranchProvider,
    IBranchSeeder,
    IConnectionHandle,
    IConnectionRegistry,
    IIdentityResolver,
    ISchemaEngine,
    ISchemaStatement,
    ITenantDirectory,
)

__all__ = [
    "IAccessRepository",
    "IAccessService",
    "IBranchDirectory",
    "IBranchMappingRepository",
    "IBranchProvider",
    "IBranchSeeder",
    "IConnectionHandle",
    "IConnectionRegistry",
    "IIdentityResolver",
    "ISchemaEngine",
    "ISchemaStatement",
    "ISettingsRepository",
    "ITenantDirectory",
    "ITenantRepository",
]
