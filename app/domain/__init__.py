"""Domain layer: entities, value objects, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.entities import TenantEntity
from app.domain.enums import (
    BranchSource,
    ForumMode,
    MappingSource,
    ProvisionStep,
    ResolutionSource,
    SettingType,
    TenantStatus,
)
from app.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    BranchMappingNotFoundException,
    ConfigurationError,
    DomainAlreadyClaimedException,
    InvalidTenantTransitionException,
    PartialSeedFailure,
    ProviderError,
    ReservedTenantException,
    SiteGridException,
    TenantNotFoundException,
    ValidationException,
)
from app.domain.value_objects import BranchName, SiteDomain, slugify_domain, strip_port

__all__ = [
    # Entities
    "TenantEntity",
    # Enums
    "BranchSource",
    "ForumMode",
    "MappingSource",
    "ProvisionStep",
    "ResolutionSource",
    "SettingType",
    "TenantStatus",
    # Exceptions
    "AuthenticationException",
    "AuthorizationException",
    "BranchMappingNotFoundException",
    "ConfigurationError",
    "DomainAlreadyClaimedException",
    "InvalidTenantTransitionException",
    "PartialSeedFailure",
    "ProviderError",
    "ReservedTenantException",
    "SiteGridException",
    "TenantNotFoundException",
    "ValidationException",
    # Value objects
    "BranchName",
    "SiteDomain",
    "slugify_domain",
    "strip_port",
]
