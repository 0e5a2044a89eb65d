"""Unit tests for TenantLifecycleService (branch teardown and tenant deletion)."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from app.application.dtos.branch import BranchMappingResult
from app.application.dtos.provisioning import BranchDeletion
from app.application.dtos.tenant import TenantResult
from app.application.services import TenantLifecycleService
from app.domain.enums import TenantStatus
from app.domain.exceptions import ReservedTenantException, TenantNotFoundException

ENDPOINT = "db://branch-5"


def _service(mapping: BranchMappingResult | None) -> tuple[TenantLifecycleService, MagicMock, MagicMock, MagicMock, MagicMock]:
    tenants = MagicMock()
    tenants.get_tenant = AsyncMock(
        return_value=TenantResult(id=5, desired_domain="foo.example.com", status=TenantStatus.ACTIVE)
    )
    tenants.mark_deleted = AsyncMock()
    provider = MagicMock()
    provider.delete_database = AsyncMock(return_value=BranchDeletion(ok=True))
    directory = MagicMock()
    directory.get_mapping = AsyncMock(return_value=mapping)
    directory.delete_mapping = AsyncMock(return_value=mapping is not None)
    access = MagicMock()
    access.revoke_tenant = AsyncMock(return_value=1)
    registry = MagicMock()
    registry.release = AsyncMock(return_value=1)
    service = TenantLifecycleService(
        tenants, provider, directory, access, registry, MagicMock()
    )
    return service, tenants, provider, directory, access


def _mapping() -> BranchMappingResult:
    return BranchMappingResult(tenant_id=5, endpoint=ENDPOINT, source="provision")


async def test_teardown_deletes_database_and_mapping() -> None:
    service, _, provider, directory, _ = _service(_mapping())

    result = await service.teardown_branch(5)

    assert result.deleted_branch
    assert result.branch_delete_ok
    assert result.endpoint == ENDPOINT
    provider.delete_database.assert_awaited_once_with(ENDPOINT)
    directory.delete_mapping.assert_awaited_once_with(5)
    service.schema_engine.forget.assert_called_once_with(ENDPOINT)
    service.registry.release.assert_awaited_once_with(ENDPOINT)


async def test_teardown_without_mapping_is_a_no_op() -> None:
    service, _, provider, directory, _ = _service(None)

    result = await service.teardown_branch(5)

    assert not result.deleted_branch
    assert result.reason == "no-mapping"
    provider.delete_database.assert_not_awaited()
    directory.delete_mapping.assert_not_awaited()
    service.registry.release.assert_not_awaited()


async def test_provider_failure_still_removes_mapping() -> None:
    service, _, provider, directory, _ = _service(_mapping())
    provider.delete_database.return_value = BranchDeletion(ok=False, error="forbidden")

    result = await service.teardown_branch(5)

    assert result.deleted_branch
    assert not result.branch_delete_ok
    assert result.branch_delete_error == "forbidden"
    directory.delete_mapping.assert_awaited_once_with(5)
    service.registry.release.assert_awaited_once_with(ENDPOINT)


async def test_delete_tenant_tears_down_revokes_and_marks_deleted() -> None:
    service, tenants, provider, _, access = _service(_mapping())

    result = await service.delete_tenant(5)

    assert result.deleted_branch
    provider.delete_database.assert_awaited_once_with(ENDPOINT)
    access.revoke_tenant.assert_awaited_once_with(5)
    tenants.mark_deleted.assert_awaited_once_with(5)


async def test_delete_unknown_tenant_touches_nothing() -> None:
    service, tenants, provider, _, access = _service(_mapping())
    tenants.get_tenant.side_effect = TenantNotFoundException(5)

    with pytest.raises(TenantNotFoundException):
        await service.delete_tenant(5)
    provider.delete_database.assert_not_awaited()
    access.revoke_tenant.assert_not_awaited()


async def test_tenant_zero_is_reserved() -> None:
    service, *_ = _service(None)
    with pytest.raises(ReservedTenantException):
        await service.teardown_branch(0)
    with pytest.raises(ReservedTenantException):
        await service.delete_tenant(0)
