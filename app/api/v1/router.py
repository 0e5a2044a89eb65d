"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from app.api.v1.dependencies (no manual repo/service construction).
"""

from fastapi import APIRouter

from app.api.v1.endpoints import (
    admin_settings,
    branches,
    health,
    public,
    tenant_requests,
    tenants,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(public.router, tags=["public"])
api_router.include_router(
    tenant_requests.router, prefix="/tenant-requests", tags=["tenant-requests"]
)
api_router.include_router(tenants.router, prefix="/tenants", tags=["tenants"])
api_router.include_router(branches.router, prefix="/branches", tags=["branches"])
api_router.include_router(
    admin_settings.router, prefix="/admin/settings", tags=["admin-settings"]
)
