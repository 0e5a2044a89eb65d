"""Authentication and authorization dependencies.

The bearer token is verified by the identity resolver, which only yields an
opaque subject id. Authorization is decided by AccessService against the
admin_user and tenant_admin tables.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.domain.exceptions import AuthenticationException

from .services import Services

_http_bearer = HTTPBearer(auto_error=False)


async def get_current_subject_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    services: Services,
) -> str:
    """Return the authenticated subject id; 401 when the token is missing or invalid."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationException("Missing bearer token")
    return services.identity.verify(credentials.credentials)


CurrentSubject = Annotated[str, Depends(get_current_subject_id)]


async def require_super_admin(subject_id: CurrentSubject, services: Services) -> str:
    """Return subject id when it is a super administrator; 403 otherwise."""
    await services.access.require_super_admin(subject_id)
    return subject_id


SuperAdmin = Annotated[str, Depends(require_super_admin)]
