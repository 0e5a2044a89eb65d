"""Cache: Redis service and cache key utilities.

Used by the tenant resolver and settings service. CacheService uses
app.core.config; key format is in keys.py (DRY).
"""

from app.infrastructure.cache.cache_protocol import CacheProtocol
from app.infrastructure.cache.keys import (
    settings_key,
    settings_pattern,
    tenant_host_key,
)
from app.infrastructure.cache.redis_cache import CacheService

__all__ = [
    "CacheProtocol",
    "CacheService",
    "settings_key",
    "settings_pattern",
    "tenant_host_key",
]
