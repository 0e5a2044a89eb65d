"""Domain exceptions for the sitegrid control plane.

Defines domain-level exceptions that represent business rule violations and
control-plane failures. These exceptions are independent of infrastructure
concerns. Presentation layer maps them to HTTP responses in exception handlers.

Resolution paths (tenant resolver, branch directory) do not raise these;
they return results with explicit default branches instead.
"""

from typing import Any


class SiteGridException(Exception):
    """Base exception for all sitegrid errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, tenant_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON error body used by the API."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(SiteGridException):
    """Raised when input validation fails (e.g. empty domain)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(SiteGridException):
    """Raised when the identity token is missing or fails verification."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(SiteGridException):
    """Raised when the subject may not act on the target tenant."""

    def __init__(
        self,
        message: str = "Permission denied",
        tenant_id: int | None = None,
    ) -> None:
        """Initialize with message and optional tenant id.

        Args:
            message: Description of the denial.
            tenant_id: Tenant the subject tried to act on.
        """
        details = {"tenant_id": tenant_id} if tenant_id is not None else {}
        super().__init__(message, "AUTHORIZATION_ERROR", details)


class TenantNotFoundException(SiteGridException):
    """Raised when a tenant id is not in the tenant directory."""

    def __init__(self, tenant_id: int) -> None:
        super().__init__(
            f"Tenant {tenant_id} not found",
            "TENANT_NOT_FOUND",
            {"tenant_id": tenant_id},
        )


class DomainAlreadyClaimedException(SiteGridException):
    """Raised when a pending or active tenant already claims the domain."""

    def __init__(self, domain: str, tenant_id: int | None = None) -> None:
        """Initialize with the contested domain.

        Args:
            domain: Desired or fallback domain that is already taken.
            tenant_id: Id of the tenant holding the claim, when known.
        """
        details: dict[str, Any] = {"domain": domain}
        if tenant_id is not None:
            details["tenant_id"] = tenant_id
        super().__init__(
            f"Domain '{domain}' is already claimed",
            "DOMAIN_ALREADY_CLAIMED",
            details,
        )


class ReservedTenantException(SiteGridException):
    """Raised for lifecycle operations on the primary tenant (id 0)."""

    def __init__(self, operation: str) -> None:
        super().__init__(
            f"Tenant 0 is reserved and cannot be {operation}",
            "RESERVED_TENANT",
            {"operation": operation},
        )


class InvalidTenantTransitionException(SiteGridException):
    """Raised when a tenant status change is not allowed from its current status."""

    def __init__(self, tenant_id: int, current: str, target: str) -> None:
        """Initialize with the rejected transition.

        Args:
            tenant_id: Tenant whose status was being changed.
            current: Current status value.
            target: Requested status value.
        """
        super().__init__(
            f"Tenant {tenant_id} cannot move from '{current}' to '{target}'",
            "INVALID_TENANT_TRANSITION",
            {"tenant_id": tenant_id, "current": current, "target": target},
        )


class BranchMappingNotFoundException(SiteGridException):
    """Raised when an explicit mapping operation targets a tenant without one."""

    def __init__(self, tenant_id: int) -> None:
        super().__init__(
            f"No branch mapping for tenant {tenant_id}",
            "BRANCH_MAPPING_NOT_FOUND",
            {"tenant_id": tenant_id},
        )


class ConfigurationError(SiteGridException):
    """Raised when connection configuration is missing or invalid.

    Fatal to the specific operation, not to the process.
    """

    def __init__(self, message: str, setting: str | None = None) -> None:
        details = {"setting": setting} if setting else {}
        super().__init__(message, "CONFIGURATION_ERROR", details)


class ProviderError(SiteGridException):
    """External branch provider call failed.

    Carries the failing step name and the provider's raw error.
    """

    def __init__(
        self,
        step: str,
        error: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with step and raw provider error.

        Args:
            step: Pipeline step that failed (e.g. "create-branch").
            error: Raw error reported by the provider.
            details: Extra provider response context.
        """
        self.step = step
        self.error = error
        super().__init__(
            f"Branch provider failed at step '{step}': {error}",
            "PROVIDER_ERROR",
            {"step": step, "provider_error": error, **(details or {})},
        )


class PartialSeedFailure(SiteGridException):
    """A single seed insert that failed during provisioning.

    Non-fatal: collected into the provisioning result, never raised out of it.
    """

    def __init__(self, item: str, error: str) -> None:
        self.item = item
        self.error = error
        super().__init__(
            f"Seeding '{item}' failed: {error}",
            "PARTIAL_SEED_FAILURE",
            {"item": item, "error": error},
        )
