"""Tenant resolution middleware.

Resolves the request's Host header to a tenant id before routing and makes
it available as request.state.tenant_id and through
app.core.tenant_context.get_tenant_id(). Resolution fails open: any host
that cannot be matched, or a lookup that fails, runs as tenant 0.
"""

import logging
from typing import Callable

from app.core.tenant_context import current_tenant_id
from app.middleware._asgi import get_header

logger = logging.getLogger(__name__)


def TenantResolutionMiddleware(app: Callable) -> Callable:
    """Set the request tenant from the Host header. Raw ASGI.

    The resolver is read from app.state.services at request time, so the
    middleware can be installed before the lifespan has built it. Without
    services (e.g. during startup) the request runs as tenant 0.
    """

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        services = getattr(scope["app"].state, "services", None) if "app" in scope else None
        host = get_header(scope, "host")
        if services is not None:
            resolution = await services.tenant_resolver.resolve_detailed(host)
            tenant_id = resolution.tenant_id
            scope.setdefault("state", {})["tenant_resolution"] = resolution
        else:
            tenant_id = current_tenant_id.get()
        scope.setdefault("state", {})["tenant_id"] = tenant_id
        token = current_tenant_id.set(tenant_id)
        try:
            await app(scope, receive, send)
        finally:
            current_tenant_id.reset(token)

    return asgi_app
