"""Wires the connection registry and the branch directory together."""

from app.core.config import Settings
from app.infrastructure.persistence.branch_directory import BranchDirectory
from app.infrastructure.persistence.connection_registry import (
    ConnectionRegistry,
    EngineFactory,
)


def build_routing(
    settings: Settings, engine_factory: EngineFactory | None = None
) -> ConnectionRegistry:
    """Build a registry whose get_handle() routes through a BranchDirectory.

    The directory reads durable mappings through the registry's primary
    handle, so the registry is created first and the directory attached.
    """
    registry = ConnectionRegistry(
        settings.primary_database_url,
        engine_factory=engine_factory,
        echo=settings.database_echo,
    )
    directory = BranchDirectory(
        registry.primary,
        settings.branch_map,
        lookup_timeout=settings.tenant_resolve_timeout_seconds,
    )
    registry.attach_directory(directory)
    return registry
