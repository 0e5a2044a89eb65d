"""Tenant request endpoints: registration, review, approval and deletion."""

import pytest

from tests.support import FALLBACK_ROOT, bearer

pytestmark = pytest.mark.api

REQUESTS = "/api/v1/tenant-requests"


async def _create(client, headers, domain: str = "foo.example.com") -> dict:
    response = await client.post(REQUESTS, json={"desired_domain": domain}, headers=headers)
    assert response.status_code == 201
    return response.json()


async def test_requires_a_token(client) -> None:
    response = await client.post(REQUESTS, json={"desired_domain": "foo.example.com"})

    assert response.status_code == 401
    assert response.json()["error"] == "AUTHENTICATION_ERROR"
    assert response.headers["WWW-Authenticate"] == "Bearer"


async def test_invalid_token_is_rejected(client) -> None:
    response = await client.get(
        f"{REQUESTS}/check-domain",
        params={"domain": "foo.example.com"},
        headers={"Authorization": "Bearer not-a-jwt"},
    )
    assert response.status_code == 401


async def test_create_request(client, identity) -> None:
    body = await _create(client, bearer(identity, "owner-1"), "  Foo.Example.com ")

    assert body["status"] == "pending"
    assert body["desired_domain"] == "foo.example.com"
    assert body["owner_subject_id"] == "owner-1"
    assert body["fallback_domain"] == f"foo-example-com.{FALLBACK_ROOT}"


async def test_duplicate_domain_conflicts(client, identity) -> None:
    await _create(client, bearer(identity, "owner-1"))

    response = await client.post(
        REQUESTS,
        json={"desired_domain": "foo.example.com"},
        headers=bearer(identity, "owner-2"),
    )

    assert response.status_code == 409
    assert response.json()["error"] == "DOMAIN_ALREADY_CLAIMED"


async def test_malformed_domain_is_400(client, identity) -> None:
    response = await client.post(
        REQUESTS,
        json={"desired_domain": "not a domain"},
        headers=bearer(identity, "owner-1"),
    )
    assert response.status_code == 400
    assert response.json()["error"] == "VALIDATION_ERROR"


async def test_check_domain(client, identity) -> None:
    headers = bearer(identity, "owner-1")
    free = await client.get(
        f"{REQUESTS}/check-domain", params={"domain": "Foo.Example.com"}, headers=headers
    )
    assert free.json() == {"domain": "foo.example.com", "available": True}

    await _create(client, headers)
    taken = await client.get(
        f"{REQUESTS}/check-domain", params={"domain": "foo.example.com"}, headers=headers
    )
    assert taken.json()["available"] is False


async def test_listing_needs_super_admin(client, identity, admin_headers) -> None:
    await _create(client, bearer(identity, "owner-1"))

    forbidden = await client.get(REQUESTS, headers=bearer(identity, "owner-1"))
    listed = await client.get(REQUESTS, headers=admin_headers)

    assert forbidden.status_code == 403
    assert forbidden.json()["error"] == "AUTHORIZATION_ERROR"
    assert listed.status_code == 200
    assert [t["desired_domain"] for t in listed.json()] == ["foo.example.com"]


async def test_owner_cannot_read_request_before_approval(client, identity, admin_headers) -> None:
    created = await _create(client, bearer(identity, "owner-1"))

    as_owner = await client.get(f"{REQUESTS}/{created['id']}", headers=bearer(identity, "owner-1"))
    as_admin = await client.get(f"{REQUESTS}/{created['id']}", headers=admin_headers)

    assert as_owner.status_code == 403
    assert as_admin.json()["id"] == created["id"]


async def test_unknown_request_is_404(client, admin_headers) -> None:
    response = await client.get(f"{REQUESTS}/999", headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["error"] == "TENANT_NOT_FOUND"


async def test_reject(client, identity, admin_headers) -> None:
    created = await _create(client, bearer(identity, "owner-1"))

    response = await client.post(
        f"{REQUESTS}/{created['id']}/reject", json={"reason": "spam"}, headers=admin_headers
    )
    again = await client.post(
        f"{REQUESTS}/{created['id']}/approve", headers=admin_headers
    )

    assert response.json()["status"] == "rejected"
    assert response.json()["rejection_reason"] == "spam"
    assert again.status_code == 409
    assert again.json()["error"] == "INVALID_TENANT_TRANSITION"


async def test_approve_provisions_and_grants_owner(client, identity, admin_headers, provider) -> None:
    created = await _create(client, bearer(identity, "owner-1"))
    tenant_id = created["id"]

    response = await client.post(f"{REQUESTS}/{tenant_id}/approve", headers=admin_headers)

    body = response.json()
    assert response.status_code == 200
    assert body["ok"]
    assert body["endpoint"] == f"db://branch-{tenant_id}"
    assert [s["name"] for s in body["steps"]][-1] == "grant-admin"
    assert provider.created == [f"tenant-{tenant_id}"]

    as_owner = await client.get(f"{REQUESTS}/{tenant_id}", headers=bearer(identity, "owner-1"))
    assert as_owner.json()["status"] == "active"


async def test_approving_tenant_zero_is_400(client, admin_headers) -> None:
    response = await client.post(f"{REQUESTS}/0/approve", headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["error"] == "RESERVED_TENANT"


async def test_delete_request(client, identity, admin_headers, provider) -> None:
    created = await _create(client, bearer(identity, "owner-1"))
    tenant_id = created["id"]
    await client.post(f"{REQUESTS}/{tenant_id}/approve", headers=admin_headers)

    response = await client.delete(f"{REQUESTS}/{tenant_id}", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["deleted_branch"] is True
    assert provider.deleted == [f"db://branch-{tenant_id}"]
    listed = await client.get(REQUESTS, params={"status": "deleted"}, headers=admin_headers)
    assert [t["id"] for t in listed.json()] == [tenant_id]


async def test_backfill_fallback(client, identity, admin_headers) -> None:
    created = await _create(client, bearer(identity, "owner-1"))

    response = await client.post(
        f"{REQUESTS}/{created['id']}/backfill-fallback", headers=admin_headers
    )

    assert response.status_code == 200
    assert response.json()["fallback_domain"] == f"foo-example-com.{FALLBACK_ROOT}"
