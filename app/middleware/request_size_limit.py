"""Request body size limit middleware.

Requests declaring a Content-Length above the limit are refused up front;
bodies without one are buffered up to the limit and replayed to the app.
"""

from typing import Callable

from app.middleware._asgi import get_header, send_json_error


async def _reject(send: Callable, max_bytes: int, seen: int) -> None:
    await send_json_error(
        send,
        413,
        "PAYLOAD_TOO_LARGE",
        f"Request body must be at most {max_bytes} bytes",
        {"max_bytes": max_bytes, "content_length": seen},
    )


def RequestSizeLimitMiddleware(app: Callable, max_bytes: int) -> Callable:
    """Reject request bodies larger than max_bytes. Raw ASGI."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return

        declared = get_header(scope, "content-length")
        if declared is not None and declared.strip().isdigit():
            if int(declared) > max_bytes:
                await _reject(send, max_bytes, int(declared))
                return
            await app(scope, receive, send)
            return

        messages: list[dict] = []
        total = 0
        while True:
            message = await receive()
            messages.append(message)
            if message["type"] != "http.request":
                break
            total += len(message.get("body", b""))
            if total > max_bytes:
                await _reject(send, max_bytes, total)
                return
            if not message.get("more_body", False):
                break

        async def replay() -> dict:
            if messages:
                return messages.pop(0)
            return await receive()

        await app(scope, replay, send)

    return asgi_app
