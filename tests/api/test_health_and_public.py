"""Health checks and the public tenant/settings endpoints."""

import pytest

from app.application.dtos.tenant import TenantRegistration

pytestmark = pytest.mark.api


async def test_health(client) -> None:
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


async def test_ready(client) -> None:
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


async def test_not_ready_when_primary_unreachable(client, services) -> None:
    registry = services.registry
    broken = registry.open_direct(0, "db://missing-dir/primary")
    registry._handles[(0, registry.primary_endpoint)] = broken

    response = await client.get("/api/v1/health/ready")

    assert response.status_code == 503
    assert response.json()["status"] == "not_ready"


async def test_resolve_unknown_host_is_tenant_zero(client) -> None:
    response = await client.get("/api/v1/tenant/resolve")
    assert response.json() == {"host": "test", "tenant_id": 0, "source": "default"}


async def test_resolve_active_tenant_host(client, services) -> None:
    tenant = await services.tenant_directory.register(
        TenantRegistration(desired_domain="foo.example.com")
    )
    await services.tenant_directory.activate(tenant.id)

    response = await client.get(
        "/api/v1/tenant/resolve", headers={"Host": "Foo.Example.com:8080"}
    )

    assert response.json() == {
        "host": "foo.example.com",
        "tenant_id": tenant.id,
        "source": "desired_domain",
    }


async def test_public_settings_for_primary_site(client) -> None:
    response = await client.get("/api/v1/settings")

    body = response.json()
    assert response.status_code == 200
    assert body["tenant_id"] == 0
    assert body["settings"]["site_name"] == "大海团队"


async def test_public_settings_follow_host(client, services) -> None:
    tenant = await services.tenant_directory.register(
        TenantRegistration(desired_domain="foo.example.com")
    )
    await services.provisioning.provision(tenant.id)

    tenant_view = await client.get("/api/v1/settings", headers={"Host": "foo.example.com"})
    main_view = await client.get(
        "/api/v1/settings", params={"scope": "main"}, headers={"Host": "foo.example.com"}
    )

    assert tenant_view.json()["tenant_id"] == tenant.id
    assert tenant_view.json()["settings"]["site_name"] == f"分站 #{tenant.id}"
    assert tenant_view.json()["settings"]["social_forum_mode"] == "isolated"
    assert main_view.json()["tenant_id"] == 0
    assert main_view.json()["settings"]["site_name"] == "大海团队"
