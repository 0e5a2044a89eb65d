"""Core constants: cache key prefixes and shared literal values.

Single source of truth for cache key structure and the reserved tenant id.
"""

# Tenant 0 is the always-present shared/primary site.
PRIMARY_TENANT_ID = 0

# Cache key prefixes
CACHE_PREFIX_TENANT = "tenant"
CACHE_PREFIX_SETTINGS = "settings"

# Delimiter for composite keys
CACHE_KEY_SEP = ":"

# Branch names are deterministic: f"{BRANCH_NAME_PREFIX}{tenant_id}".
BRANCH_NAME_PREFIX = "tenant-"
