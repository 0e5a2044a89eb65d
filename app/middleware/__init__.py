"""HTTP middleware: timeout, request size limit, request ID, tenant resolution.

Applied in main app; order matters (last added = outermost).
Import and use from app.main.
"""

from app.middleware.request_id import RequestIDMiddleware
from app.middleware.request_size_limit import RequestSizeLimitMiddleware
from app.middleware.tenant_resolution import TenantResolutionMiddleware
from app.middleware.timeout import TimeoutMiddleware

__all__ = [
    "RequestIDMiddleware",
    "RequestSizeLimitMiddleware",
    "TenantResolutionMiddleware",
    "TimeoutMiddleware",
]
