"""Domain value objects for the sitegrid control plane.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

import re
from dataclasses import dataclass
from typing import ClassVar

from app.core.constants import BRANCH_NAME_PREFIX, PRIMARY_TENANT_ID

_NON_SLUG_RE = re.compile(r"[^a-z0-9]+")
_DOTS_RE = re.compile(r"\.+")

SLUG_MAX_LENGTH = 63
DEFAULT_SLUG = "site"


def strip_port(host: str) -> str:
    """Return host without a trailing ':port' (hostname only).

    Bracketed IPv6 hosts ("[::1]:8080") come back as the bare address; an
    unbracketed IPv6 address has no port to strip.
    """
    host = host.strip()
    if host.startswith("["):
        address, closed, _ = host[1:].partition("]")
        return address if closed else host
    if host.count(":") > 1:
        return host
    return host.partition(":")[0]


def slugify_domain(domain: str) -> str:
    """Derive a DNS-label slug from a domain.

    Dots become hyphens, any other run of non-alphanumerics becomes a single
    hyphen, leading/trailing hyphens are trimmed and the result is cut to 63
    characters. Empty input yields "site".

    Args:
        domain: Desired domain as entered (e.g. "Foo.Example.com").

    Returns:
        Slug such as "foo-example-com".
    """
    lowered = _DOTS_RE.sub("-", domain or "").lower()
    slug = _NON_SLUG_RE.sub("-", lowered).strip("-")[:SLUG_MAX_LENGTH]
    slug = slug.strip("-")
    return slug or DEFAULT_SLUG


@dataclass(frozen=True)
class SiteDomain:
    """Value object for a tenant's desired domain.

    Normalizes surrounding whitespace; rejects empty values and values
    containing whitespace or a scheme.
    """

    value: str

    MAX_LENGTH: ClassVar[int] = 253

    def __post_init__(self) -> None:
        normalized = (self.value or "").strip()
        object.__setattr__(self, "value", normalized)
        if not normalized:
            raise ValueError("Domain must be a non-empty string")
        if len(normalized) > self.MAX_LENGTH:
            raise ValueError(f"Domain must not exceed {self.MAX_LENGTH} characters")
        if "://" in normalized or any(ch.isspace() for ch in normalized):
            raise ValueError("Domain must be a bare host name (no scheme or spaces)")

    def slug(self) -> str:
        """Return the fallback-domain slug for this domain."""
        return slugify_domain(self.value)


@dataclass(frozen=True)
class BranchName:
    """Deterministic branch name for a tenant (e.g. "tenant-5")."""

    tenant_id: int

    def __post_init__(self) -> None:
        if self.tenant_id <= PRIMARY_TENANT_ID:
            raise ValueError("Branch names exist only for tenants with id > 0")

    @property
    def value(self) -> str:
        return f"{BRANCH_NAME_PREFIX}{self.tenant_id}"

    def __str__(self) -> str:
        return self.value
