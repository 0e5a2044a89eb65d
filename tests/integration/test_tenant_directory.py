"""Tenant registration, claims and status changes on the primary dataset."""

import pytest

from app.application.dtos.tenant import TenantRegistration
from app.domain.enums import TenantStatus
from app.domain.exceptions import (
    ConfigurationError,
    DomainAlreadyClaimedException,
    InvalidTenantTransitionException,
    ReservedTenantException,
    TenantNotFoundException,
    ValidationException,
)
from app.infrastructure.services import TenantDirectoryService
from app.infrastructure.services.tenant_directory_service import unique_slug
from tests.support import FALLBACK_ROOT


def _reg(domain: str, owner: str | None = "owner-1") -> TenantRegistration:
    return TenantRegistration(desired_domain=domain, owner_subject_id=owner)


def test_unique_slug_suffixes() -> None:
    assert unique_slug("shop", set()) == "shop"
    assert unique_slug("shop", {"shop"}) == "shop-1"
    assert unique_slug("shop", {"shop", "shop-1", "shop-2"}) == "shop-3"
    taken = {"shop"} | {f"shop-{i}" for i in range(1, 6)}
    assert unique_slug("shop", taken) == "shop"


async def test_register_creates_pending_tenant_with_fallback(services) -> None:
    tenant = await services.tenant_directory.register(_reg("  Foo.Example.com "))

    assert tenant.id >= 1
    assert tenant.status == TenantStatus.PENDING
    assert tenant.desired_domain == "foo.example.com"
    assert tenant.slug == "foo-example-com"
    assert tenant.fallback_domain == f"foo-example-com.{FALLBACK_ROOT}"
    assert tenant.owner_subject_id == "owner-1"


async def test_duplicate_desired_domain_rejected(services) -> None:
    first = await services.tenant_directory.register(_reg("foo.example.com"))

    with pytest.raises(DomainAlreadyClaimedException) as exc_info:
        await services.tenant_directory.register(_reg("FOO.example.com", owner="owner-2"))
    assert exc_info.value.details["tenant_id"] == first.id


async def test_desired_domain_equal_to_a_fallback_is_rejected(services) -> None:
    await services.tenant_directory.register(_reg("foo.example.com"))

    with pytest.raises(DomainAlreadyClaimedException):
        await services.tenant_directory.register(_reg(f"foo-example-com.{FALLBACK_ROOT}"))


async def test_rejected_tenant_releases_its_domain(services) -> None:
    directory = services.tenant_directory
    first = await directory.register(_reg("foo.example.com"))
    await directory.reject(first.id, "spam")

    second = await directory.register(_reg("foo.example.com", owner="owner-2"))

    assert second.id != first.id
    # Slugs stay reserved across statuses.
    assert second.slug == "foo-example-com-1"
    assert second.fallback_domain == f"foo-example-com-1.{FALLBACK_ROOT}"


async def test_malformed_domain_is_a_validation_error(services) -> None:
    with pytest.raises(ValidationException):
        await services.tenant_directory.register(_reg("https://foo.example.com"))


async def test_check_domain(services) -> None:
    directory = services.tenant_directory
    assert await directory.check_domain("foo.example.com")
    await directory.register(_reg("foo.example.com"))
    assert not await directory.check_domain("Foo.Example.com")
    assert not await directory.check_domain(f"foo-example-com.{FALLBACK_ROOT}")


async def test_reject_records_reason_and_is_final(services) -> None:
    directory = services.tenant_directory
    tenant = await directory.register(_reg("foo.example.com"))

    rejected = await directory.reject(tenant.id, "  not a real shop ")

    assert rejected.status == TenantStatus.REJECTED
    assert rejected.rejection_reason == "not a real shop"
    with pytest.raises(InvalidTenantTransitionException):
        await directory.activate(tenant.id)


async def test_activate_and_mark_deleted(services) -> None:
    directory = services.tenant_directory
    tenant = await directory.register(_reg("foo.example.com"))

    assert (await directory.activate(tenant.id)).status == TenantStatus.ACTIVE
    assert (await directory.activate(tenant.id)).status == TenantStatus.ACTIVE
    assert (await directory.mark_deleted(tenant.id)).status == TenantStatus.DELETED
    with pytest.raises(InvalidTenantTransitionException):
        await directory.mark_deleted(tenant.id)


async def test_unknown_and_reserved_tenants(services) -> None:
    directory = services.tenant_directory
    with pytest.raises(TenantNotFoundException):
        await directory.get_tenant(999)
    with pytest.raises(TenantNotFoundException):
        await directory.activate(999)
    with pytest.raises(ReservedTenantException):
        await directory.reject(0, "no")


async def test_list_tenants_newest_first_with_status_filter(services) -> None:
    directory = services.tenant_directory
    a = await directory.register(_reg("a.example.com"))
    b = await directory.register(_reg("b.example.com"))
    await directory.reject(a.id, None)

    assert [t.id for t in await directory.list_tenants()] == [b.id, a.id]
    assert [t.id for t in await directory.list_tenants(status=TenantStatus.PENDING)] == [b.id]


async def test_no_fallback_without_root_domain(services) -> None:
    directory = TenantDirectoryService(services.registry, fallback_root_domain="")
    tenant = await directory.register(_reg("bar.example.com"))

    assert tenant.fallback_domain is None
    assert tenant.slug == "bar-example-com"
    with pytest.raises(ConfigurationError):
        await directory.backfill_fallback(tenant.id)


async def test_backfill_fallback_keeps_slug(services) -> None:
    bare = TenantDirectoryService(services.registry, fallback_root_domain="")
    tenant = await bare.register(_reg("bar.example.com"))

    updated = await services.tenant_directory.backfill_fallback(tenant.id)

    assert updated.slug == "bar-example-com"
    assert updated.fallback_domain == f"bar-example-com.{FALLBACK_ROOT}"
