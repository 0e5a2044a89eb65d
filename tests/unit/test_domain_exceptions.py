"""Tests for domain exceptions (error_code, message, details)."""

from app.domain.exceptions import (
    AuthorizationException,
    ConfigurationError,
    DomainAlreadyClaimedException,
    PartialSeedFailure,
    ProviderError,
    ReservedTenantException,
    SiteGridException,
    TenantNotFoundException,
    ValidationException,
)


def test_base_exception_default_error_code() -> None:
    """SiteGridException uses the class name as error_code when not provided."""
    exc = SiteGridException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "SiteGridException"
    assert exc.details == {}


def test_to_dict_is_the_api_error_body() -> None:
    exc = SiteGridException("Oops", error_code="CUSTOM", details={"key": "value"})
    assert exc.to_dict() == {"error": "CUSTOM", "message": "Oops", "details": {"key": "value"}}


def test_validation_exception_field() -> None:
    exc = ValidationException("Invalid format", field="desired_domain")
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.details == {"field": "desired_domain"}
    assert ValidationException("No field").details == {}


def test_tenant_not_found() -> None:
    exc = TenantNotFoundException(7)
    assert exc.error_code == "TENANT_NOT_FOUND"
    assert exc.details == {"tenant_id": 7}
    assert "7" in exc.message


def test_domain_already_claimed_carries_holder() -> None:
    exc = DomainAlreadyClaimedException("foo.example.com", 3)
    assert exc.error_code == "DOMAIN_ALREADY_CLAIMED"
    assert exc.details == {"domain": "foo.example.com", "tenant_id": 3}
    assert DomainAlreadyClaimedException("bar.example.com").details == {
        "domain": "bar.example.com"
    }


def test_reserved_tenant_names_operation() -> None:
    exc = ReservedTenantException("provisioned")
    assert exc.error_code == "RESERVED_TENANT"
    assert exc.message == "Tenant 0 is reserved and cannot be provisioned"


def test_authorization_exception_tenant_detail() -> None:
    assert AuthorizationException(tenant_id=4).details == {"tenant_id": 4}
    assert AuthorizationException().details == {}


def test_configuration_error_setting() -> None:
    exc = ConfigurationError("missing", setting="primary_database_url")
    assert exc.error_code == "CONFIGURATION_ERROR"
    assert exc.details == {"setting": "primary_database_url"}


def test_provider_error_keeps_step_and_raw_error() -> None:
    exc = ProviderError("create-branch", "quota exceeded", {"tenant_id": 5})
    assert exc.step == "create-branch"
    assert exc.error == "quota exceeded"
    assert exc.error_code == "PROVIDER_ERROR"
    assert exc.details == {
        "step": "create-branch",
        "provider_error": "quota exceeded",
        "tenant_id": 5,
    }


def test_partial_seed_failure() -> None:
    exc = PartialSeedFailure("welcome-post", "no such table: posts")
    assert exc.item == "welcome-post"
    assert exc.error == "no such table: posts"
    assert exc.details == {"item": "welcome-post", "error": "no such table: posts"}
