"""Cache key builders. Single place for key format (DRY).

Key components must not contain CACHE_KEY_SEP to avoid ambiguous or
colliding keys; hosts are normalized (lowercase, no port) before use.
"""

from app.core.constants import CACHE_KEY_SEP, CACHE_PREFIX_SETTINGS, CACHE_PREFIX_TENANT


def _validate_key_component(value: str, name: str) -> None:
    """Raise ValueError if value contains the cache key separator."""
    if CACHE_KEY_SEP in value:
        raise ValueError(
            f"Cache key component {name!r} must not contain separator {CACHE_KEY_SEP!r}"
        )


def tenant_host_key(host: str) -> str:
    """Cache key for the tenant id resolved from a request host."""
    _validate_key_component(host, "host")
    return f"{CACHE_PREFIX_TENANT}{CACHE_KEY_SEP}host{CACHE_KEY_SEP}{host}"


def settings_key(tenant_id: int) -> str:
    """Cache key for a tenant's merged settings."""
    return f"{CACHE_PREFIX_SETTINGS}{CACHE_KEY_SEP}{tenant_id}"


def settings_pattern() -> str:
    """Pattern matching every tenant's merged settings."""
    return f"{CACHE_PREFIX_SETTINGS}{CACHE_KEY_SEP}*"
