"""Database-branch provider client."""

from app.infrastructure.external.branch_provider.http_provider import HttpBranchProvider

__all__ = ["HttpBranchProvider"]
