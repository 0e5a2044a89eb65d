"""Raw ASGI middleware against small inline apps."""

import asyncio
import uuid

from httpx import ASGITransport, AsyncClient

from app.core.tenant_context import get_tenant_id
from app.middleware import (
    RequestIDMiddleware,
    RequestSizeLimitMiddleware,
    TenantResolutionMiddleware,
    TimeoutMiddleware,
)
from app.middleware.request_id import sanitize_request_id


async def _echo_app(scope, receive, send) -> None:
    """Reads the whole body and answers with its length and the request state."""
    body = b""
    while True:
        message = await receive()
        body += message.get("body", b"")
        if not message.get("more_body", False):
            break
    state = scope.get("state", {})
    payload = f"{len(body)}|{state.get('request_id', '')}|{state.get('tenant_id', '')}"
    await send({
        "type": "http.response.start",
        "status": 200,
        "headers": [(b"content-type", b"text/plain")],
    })
    await send({"type": "http.response.body", "body": payload.encode()})


def _client(app) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


def test_sanitize_request_id() -> None:
    assert sanitize_request_id("abc-123_X") == "abc-123_X"
    generated = sanitize_request_id("bad id; drop table")
    assert str(uuid.UUID(generated)) == generated
    assert sanitize_request_id("x" * 65) != "x" * 65
    assert sanitize_request_id(None)


async def test_request_id_is_forwarded_and_echoed() -> None:
    async with _client(RequestIDMiddleware(_echo_app)) as client:
        response = await client.get("/", headers={"X-Request-ID": "req-42"})

    assert response.headers["x-request-id"] == "req-42"
    assert response.text.split("|")[1] == "req-42"


async def test_request_id_is_generated_when_unsafe() -> None:
    async with _client(RequestIDMiddleware(_echo_app)) as client:
        response = await client.get("/", headers={"X-Request-ID": "<script>"})

    assert response.headers["x-request-id"] != "<script>"
    uuid.UUID(response.headers["x-request-id"])


async def test_body_over_limit_is_413() -> None:
    async with _client(RequestSizeLimitMiddleware(_echo_app, max_bytes=10)) as client:
        response = await client.post("/", content=b"x" * 11)

    assert response.status_code == 413
    assert response.json()["error"] == "PAYLOAD_TOO_LARGE"
    assert response.json()["details"]["max_bytes"] == 10


async def test_body_within_limit_passes() -> None:
    async with _client(RequestSizeLimitMiddleware(_echo_app, max_bytes=10)) as client:
        response = await client.post("/", content=b"x" * 10)

    assert response.status_code == 200
    assert response.text.split("|")[0] == "10"


async def test_streamed_body_over_limit_is_413() -> None:
    async def chunks():
        for _ in range(4):
            yield b"x" * 5

    async with _client(RequestSizeLimitMiddleware(_echo_app, max_bytes=10)) as client:
        response = await client.post("/", content=chunks())

    assert response.status_code == 413


async def test_slow_request_is_504() -> None:
    async def slow_app(scope, receive, send) -> None:
        await asyncio.sleep(1)
        await _echo_app(scope, receive, send)

    async with _client(TimeoutMiddleware(slow_app, timeout_seconds=0.05)) as client:
        response = await client.get("/")

    assert response.status_code == 504
    assert response.json()["error"] == "GATEWAY_TIMEOUT"


async def test_fast_request_is_untouched() -> None:
    async with _client(TimeoutMiddleware(_echo_app, timeout_seconds=5)) as client:
        response = await client.get("/")
    assert response.status_code == 200


async def test_tenant_defaults_to_zero_without_services() -> None:
    seen: list[int] = []

    async def app(scope, receive, send) -> None:
        seen.append(get_tenant_id())
        await _echo_app(scope, receive, send)

    async with _client(TenantResolutionMiddleware(app)) as client:
        response = await client.get("/", headers={"Host": "foo.example.com"})

    assert seen == [0]
    assert response.text.split("|")[2] == "0"
