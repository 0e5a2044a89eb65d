"""Request timeout middleware.

Bounds each HTTP request with asyncio.wait_for and answers 504 when the
bound is hit before the response started. Provisioning calls an external
provider, so the default timeout is generous.
"""

import asyncio
import logging
from typing import Callable

from app.middleware._asgi import send_json_error

logger = logging.getLogger(__name__)


def TimeoutMiddleware(app: Callable, timeout_seconds: int) -> Callable:
    """Cancel request after timeout_seconds. Raw ASGI."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        started = False

        async def send_wrapper(message: dict) -> None:
            nonlocal started
            if message["type"] == "http.response.start":
                started = True
            await send(message)

        try:
            await asyncio.wait_for(app(scope, receive, send_wrapper), timeout=timeout_seconds)
        except TimeoutError:
            logger.warning(
                "Request timed out after %ss: %s %s",
                timeout_seconds,
                scope.get("method", ""),
                scope.get("path", ""),
            )
            if not started:
                await send_json_error(
                    send,
                    504,
                    "GATEWAY_TIMEOUT",
                    f"Request timed out after {timeout_seconds} seconds",
                    {"timeout_seconds": timeout_seconds},
                )

    return asgi_app
