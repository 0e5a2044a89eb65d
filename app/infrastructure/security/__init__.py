"""Security: identity token verification."""

from app.infrastructure.security.jwt import JwtIdentityResolver

__all__ = ["JwtIdentityResolver"]
