"""Tenant context for the current request.

The host resolution middleware stores the resolved tenant id here so that
services called deep inside a request can read it without threading it
through every signature. Defaults to the primary tenant.
"""

from contextvars import ContextVar

from app.core.constants import PRIMARY_TENANT_ID

# Current tenant ID for the request (set by middleware).
current_tenant_id: ContextVar[int] = ContextVar(
    "current_tenant_id", default=PRIMARY_TENANT_ID
)


def get_tenant_id() -> int:
    """Return the current tenant ID (primary tenant when unset)."""
    return current_tenant_id.get()
