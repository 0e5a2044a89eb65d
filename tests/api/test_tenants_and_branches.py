"""Tenant branch operations and branch routing administration."""

import pytest

from app.application.dtos.tenant import TenantRegistration
from tests.support import SUPER_ADMIN, bearer

pytestmark = pytest.mark.api


async def _pending_tenant(services, owner: str = "owner-1") -> int:
    tenant = await services.tenant_directory.register(
        TenantRegistration(desired_domain="foo.example.com", owner_subject_id=owner)
    )
    return tenant.id


async def test_provision(client, services, admin_headers) -> None:
    tenant_id = await _pending_tenant(services)

    response = await client.post(f"/api/v1/tenants/{tenant_id}/provision", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["ok"] is True
    assert response.json()["failed_step"] is None


async def test_provision_provider_failure_is_502(client, services, admin_headers, provider) -> None:
    tenant_id = await _pending_tenant(services)
    provider.create_error = "branch quota exceeded"

    response = await client.post(f"/api/v1/tenants/{tenant_id}/provision", headers=admin_headers)

    body = response.json()
    assert response.status_code == 502
    assert body["error"] == "PROVIDER_ERROR"
    assert body["details"]["step"] == "create-branch"
    assert body["details"]["provider_error"] == "branch quota exceeded"
    assert body["details"]["failed_step"] == "create-branch"
    assert [s["name"] for s in body["details"]["steps"]] == ["branch-name", "create-branch"]


async def test_provision_needs_super_admin(client, services, identity) -> None:
    tenant_id = await _pending_tenant(services)

    response = await client.post(
        f"/api/v1/tenants/{tenant_id}/provision", headers=bearer(identity, "owner-1")
    )

    assert response.status_code == 403


async def test_branch_health(client, services, admin_headers) -> None:
    tenant_id = await _pending_tenant(services)
    await services.provisioning.provision(tenant_id)

    response = await client.get(f"/api/v1/tenants/{tenant_id}/branch-health", headers=admin_headers)

    body = response.json()
    assert body["passed"] is True
    assert body["endpoint"] == f"db://branch-{tenant_id}"
    assert body["missing"] == []
    assert "profiles" in body["tables"]


async def test_delete_branch_keeps_tenant(client, services, admin_headers, provider) -> None:
    tenant_id = await _pending_tenant(services)
    await services.provisioning.provision(tenant_id)

    first = await client.post(f"/api/v1/tenants/{tenant_id}/delete-branch", headers=admin_headers)
    second = await client.post(f"/api/v1/tenants/{tenant_id}/delete-branch", headers=admin_headers)

    assert first.json()["deleted_branch"] is True
    assert second.json() == {
        "tenant_id": tenant_id,
        "deleted_branch": False,
        "branch_delete_ok": False,
        "branch_delete_error": None,
        "endpoint": None,
        "reason": "no-mapping",
    }
    assert (await services.tenant_directory.get_tenant(tenant_id)).status.value == "active"


async def test_tenant_admin_reseeds_page_content(client, services, identity) -> None:
    tenant_id = await _pending_tenant(services, owner="owner-1")
    await services.provisioning.provision(tenant_id)

    own = await client.post(
        f"/api/v1/tenants/{tenant_id}/seed-page-content", headers=bearer(identity, "owner-1")
    )
    other = await client.post(
        f"/api/v1/tenants/{tenant_id}/seed-page-content", headers=bearer(identity, "owner-2")
    )

    assert own.json() == {"ok": True, "failures": []}
    assert other.status_code == 403


async def test_mapping_crud(client, admin_headers) -> None:
    created = await client.post(
        "/api/v1/branches", json={"tenant_id": 3, "endpoint": " db://custom "}, headers=admin_headers
    )
    listed = await client.get("/api/v1/branches", headers=admin_headers)
    deleted = await client.delete("/api/v1/branches/3", headers=admin_headers)
    missing = await client.delete("/api/v1/branches/3", headers=admin_headers)

    assert created.json()["endpoint"] == "db://custom"
    assert created.json()["source"] == "admin"
    assert created.json()["updated_by"] == SUPER_ADMIN
    assert [m["tenant_id"] for m in listed.json()["mappings"]] == [3]
    assert deleted.json() == {"deleted": True}
    assert missing.status_code == 404
    assert missing.json()["error"] == "BRANCH_MAPPING_NOT_FOUND"


async def test_tenant_zero_cannot_be_mapped(client, admin_headers) -> None:
    response = await client.post(
        "/api/v1/branches", json={"tenant_id": 0, "endpoint": "db://x"}, headers=admin_headers
    )
    assert response.status_code == 422


async def test_overrides(client, services, admin_headers) -> None:
    set_response = await client.post(
        "/api/v1/branches/overrides",
        json={"tenant_id": 4, "endpoint": "db://override-4"},
        headers=admin_headers,
    )
    handle = await services.registry.get_handle(4)
    cleared = await client.delete("/api/v1/branches/overrides/4", headers=admin_headers)
    cleared_again = await client.delete("/api/v1/branches/overrides/4", headers=admin_headers)
    listed = await client.get("/api/v1/branches/overrides", headers=admin_headers)

    assert set_response.json() == {"overrides": {"4": "db://override-4"}}
    assert handle.endpoint == "db://override-4"
    assert cleared.json() == {"deleted": True}
    assert cleared_again.json() == {"deleted": False}
    assert listed.json() == {"overrides": {}}


async def test_branch_admin_needs_super_admin(client, identity) -> None:
    response = await client.get("/api/v1/branches", headers=bearer(identity, "owner-1"))
    assert response.status_code == 403
