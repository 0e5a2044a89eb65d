"""Provisioning and teardown end to end, with the stub provider and SQLite branches."""

import pytest
from sqlalchemy import func, select

from app.application.dtos.tenant import TenantRegistration
from app.domain.enums import MappingSource, ProvisionStep, TenantStatus
from app.domain.exceptions import InvalidTenantTransitionException, ReservedTenantException
from app.infrastructure.persistence.models import PageContent, Post, Profile


async def _register(services, domain: str = "foo.example.com", owner: str | None = "owner-1") -> int:
    tenant = await services.tenant_directory.register(
        TenantRegistration(desired_domain=domain, owner_subject_id=owner)
    )
    return tenant.id


async def _count(handle, model) -> int:
    async with handle.session() as session:
        return (await session.execute(select(func.count()).select_from(model))).scalar_one()


async def test_provision_new_tenant(services, provider) -> None:
    tenant_id = await _register(services)

    result = await services.provisioning.provision(tenant_id, actor_id="super-admin-1")

    assert result.ok
    assert result.endpoint == f"db://branch-{tenant_id}"
    assert result.branch_name == f"tenant-{tenant_id}"
    assert [s.step for s in result.steps] == list(ProvisionStep)
    assert all(s.ok for s in result.steps)
    assert provider.created == [f"tenant-{tenant_id}"]

    tenant = await services.tenant_directory.get_tenant(tenant_id)
    assert tenant.status == TenantStatus.ACTIVE
    mapping = await services.branch_directory.get_mapping(tenant_id)
    assert mapping.endpoint == result.endpoint
    assert mapping.source == MappingSource.PROVISION.value
    assert mapping.updated_by == "super-admin-1"


async def test_provisioned_tenant_routes_to_its_branch(services) -> None:
    tenant_id = await _register(services)
    await services.provisioning.provision(tenant_id)

    handle = await services.registry.get_handle(tenant_id)
    values = await services.settings_service.resolve(tenant_id)
    health = await services.inspector.inspect(tenant_id)

    assert handle.endpoint == f"db://branch-{tenant_id}"
    assert values["site_name"] == f"分站 #{tenant_id}"
    assert values["social_forum_mode"] == "isolated"
    assert values["seo_title_suffix"] == ""
    assert values["social_post_cost"] == "100"
    assert health.passed
    assert await _count(handle, Profile) == 1
    assert await _count(handle, Post) == 1
    assert await _count(handle, PageContent) == 10


async def test_owner_becomes_tenant_admin(services) -> None:
    tenant_id = await _register(services, owner="owner-7")
    assert not await services.access.can_manage_tenant("owner-7", tenant_id)

    await services.provisioning.provision(tenant_id)

    assert await services.access.can_manage_tenant("owner-7", tenant_id)
    assert await services.access.managed_tenants("owner-7") == [tenant_id]


async def test_grant_skipped_without_owner(services) -> None:
    tenant_id = await _register(services, owner=None)

    result = await services.provisioning.provision(tenant_id)

    assert result.ok
    assert result.step(ProvisionStep.GRANT_ADMIN).skipped


async def test_provider_failure_leaves_tenant_pending(services, provider) -> None:
    tenant_id = await _register(services)
    provider.create_error = "branch quota exceeded"

    result = await services.provisioning.provision(tenant_id)

    assert not result.ok
    assert result.failed_step == ProvisionStep.CREATE_BRANCH
    assert result.error == "branch quota exceeded"
    assert [s.step for s in result.steps] == [
        ProvisionStep.BRANCH_NAME,
        ProvisionStep.CREATE_BRANCH,
    ]
    assert (await services.tenant_directory.get_tenant(tenant_id)).status == TenantStatus.PENDING
    assert await services.branch_directory.get_mapping(tenant_id) is None


async def test_reprovision_is_repeatable(services) -> None:
    tenant_id = await _register(services)
    await services.provisioning.provision(tenant_id)

    again = await services.provisioning.provision(tenant_id)

    assert again.ok
    handle = await services.registry.get_handle(tenant_id)
    assert await _count(handle, Profile) == 1
    assert await _count(handle, Post) == 1
    assert await _count(handle, PageContent) == 10


async def test_reprovision_records_previous_endpoint(services) -> None:
    tenant_id = await _register(services)
    await services.branch_directory.set_mapping(
        tenant_id, "db://old-branch", source=MappingSource.ADMIN.value
    )

    result = await services.provisioning.provision(tenant_id)

    mapping_step = result.step(ProvisionStep.PERSIST_MAPPING)
    assert mapping_step.details["previous_endpoint"] == "db://old-branch"
    assert (await services.branch_directory.get_mapping(tenant_id)).endpoint == result.endpoint


async def test_rejected_tenant_cannot_be_provisioned(services, provider) -> None:
    tenant_id = await _register(services)
    await services.tenant_directory.reject(tenant_id, "spam")

    with pytest.raises(InvalidTenantTransitionException):
        await services.provisioning.provision(tenant_id)
    assert provider.created == []


async def test_tenant_zero_is_never_provisioned(services) -> None:
    with pytest.raises(ReservedTenantException):
        await services.provisioning.provision(0)


async def test_teardown_removes_branch_and_mapping(services, provider) -> None:
    tenant_id = await _register(services)
    await services.provisioning.provision(tenant_id)

    result = await services.lifecycle.teardown_branch(tenant_id)

    assert result.deleted_branch
    assert result.branch_delete_ok
    assert provider.deleted == [f"db://branch-{tenant_id}"]
    assert await services.branch_directory.get_mapping(tenant_id) is None
    assert (await services.registry.get_handle(tenant_id)).endpoint == services.registry.primary_endpoint


async def test_reprovision_after_teardown_rebuilds_schema(services, tmp_path) -> None:
    tenant_id = await _register(services)
    endpoint = f"db://branch-{tenant_id}"
    await services.provisioning.provision(tenant_id)
    await services.lifecycle.teardown_branch(tenant_id)
    assert all(key[1] != endpoint for key in services.registry.cached_keys())
    # The provider hands back the same branch name as a brand new database.
    (tmp_path / f"branch-{tenant_id}.db").unlink()

    result = await services.provisioning.provision(tenant_id)

    schema_step = result.step(ProvisionStep.INITIALIZE_SCHEMA)
    assert result.ok
    assert schema_step.ok
    assert schema_step.details["applied"] > 0
    assert result.step(ProvisionStep.SEED_CONTENT).ok
    assert (await services.inspector.inspect(tenant_id)).passed
    assert await _count(await services.registry.get_handle(tenant_id), Profile) == 1


async def test_teardown_without_mapping(services, provider) -> None:
    tenant_id = await _register(services)

    result = await services.lifecycle.teardown_branch(tenant_id)

    assert not result.deleted_branch
    assert result.reason == "no-mapping"
    assert provider.deleted == []


async def test_provider_delete_failure_still_drops_mapping(services, provider) -> None:
    tenant_id = await _register(services)
    await services.provisioning.provision(tenant_id)
    provider.delete_error = "branch is protected"

    result = await services.lifecycle.teardown_branch(tenant_id)

    assert result.deleted_branch
    assert not result.branch_delete_ok
    assert result.branch_delete_error == "branch is protected"
    assert await services.branch_directory.get_mapping(tenant_id) is None


async def test_delete_tenant(services, provider) -> None:
    tenant_id = await _register(services, owner="owner-7")
    await services.provisioning.provision(tenant_id)

    await services.lifecycle.delete_tenant(tenant_id)

    tenant = await services.tenant_directory.get_tenant(tenant_id)
    assert tenant.status == TenantStatus.DELETED
    assert provider.deleted == [f"db://branch-{tenant_id}"]
    assert not await services.access.can_manage_tenant("owner-7", tenant_id)
    assert await services.tenant_resolver.resolve("foo.example.com") == 0
