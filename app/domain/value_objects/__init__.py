"""Domain value objects and shared value types."""

from app.domain.value_objects.core import (
    BranchName,
    SiteDomain,
    slugify_domain,
    strip_port,
)

__all__ = [
    "BranchName",
    "SiteDomain",
    "slugify_domain",
    "strip_port",
]
