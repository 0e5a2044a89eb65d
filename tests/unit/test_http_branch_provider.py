"""Tests for HttpBranchProvider against httpx.MockTransport."""

import json

import httpx

from app.infrastructure.external.branch_provider import HttpBranchProvider

API = "https://api.turso.test/v1"


def _provider(handler, *, token: str | None = "tok", organization: str = "acme") -> HttpBranchProvider:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpBranchProvider(
        client,
        api_url=API,
        api_token=token,
        organization=organization,
        endpoint_template="sqlite+libsql://{hostname}?secure=true",
    )


async def test_create_branch_posts_seeded_database() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={"database": {"Name": "tenant-5", "Hostname": "tenant-5-acme.turso.io"}},
        )

    result = await _provider(handler).create_branch("main-db", "tenant-5", "eu")

    assert result.ok
    assert result.endpoint == "sqlite+libsql://tenant-5-acme.turso.io?secure=true"
    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == f"{API}/organizations/acme/databases"
    assert request.headers["Authorization"] == "Bearer tok"
    assert json.loads(request.content) == {
        "name": "tenant-5",
        "group": "eu",
        "seed": {"type": "database", "name": "main-db"},
    }


async def test_create_branch_reports_provider_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(402, json={"error": "database quota exceeded"})

    result = await _provider(handler).create_branch("main-db", "tenant-5")

    assert not result.ok
    assert result.endpoint is None
    assert result.error == "database quota exceeded"
    assert result.details == {"status_code": 402}


async def test_create_branch_transport_error_is_a_result() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused")

    result = await _provider(handler).create_branch("main-db", "tenant-5")

    assert not result.ok
    assert "connection refused" in result.error


async def test_create_branch_without_hostname_fails() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"database": {"Name": "tenant-5"}})

    result = await _provider(handler).create_branch("main-db", "tenant-5")

    assert not result.ok
    assert result.error == "provider response has no hostname"


async def test_create_branch_non_json_success_is_a_result() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>ok</html>")

    result = await _provider(handler).create_branch("main-db", "tenant-5")

    assert not result.ok
    assert result.endpoint is None
    assert result.error.startswith("provider response is not JSON")
    assert "<html>ok</html>" in result.error
    assert result.details == {"status_code": 200}


async def test_create_branch_unexpected_json_shape_is_a_result() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(201, json=[{"database": {"Hostname": "x.turso.io"}}])

    result = await _provider(handler).create_branch("main-db", "tenant-5")

    assert not result.ok
    assert result.error == "provider response has no database object"


async def test_missing_configuration_never_calls_provider() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    result = await _provider(handler, token=None).create_branch("main-db", "tenant-5")
    assert not result.ok
    assert "token" in result.error

    result = await _provider(handler).create_branch("", "tenant-5")
    assert not result.ok
    assert "source database" in result.error


def test_database_name_for_endpoint() -> None:
    provider = _provider(lambda request: httpx.Response(200))
    assert (
        provider.database_name_for("sqlite+libsql://tenant-5-acme.turso.io?secure=true")
        == "tenant-5"
    )
    assert provider.database_name_for("not a url") is None


async def test_delete_database_treats_404_as_deleted() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(404, json={"error": "not found"})

    result = await _provider(handler).delete_database(
        "sqlite+libsql://tenant-5-acme.turso.io?secure=true"
    )

    assert result.ok
    assert seen[0].method == "DELETE"
    assert str(seen[0].url) == f"{API}/organizations/acme/databases/tenant-5"


async def test_delete_database_reports_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="boom")

    result = await _provider(handler).delete_database(
        "sqlite+libsql://tenant-5-acme.turso.io?secure=true"
    )

    assert not result.ok
    assert result.error == "boom"
