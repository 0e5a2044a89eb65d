"""Domain entities and aggregates.

Pure domain models; no ORM or persistence concerns.
"""

from app.domain.entities.tenant import TenantEntity

__all__ = ["TenantEntity"]
