"""Health check endpoints: liveness and readiness checks."""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.api.v1.dependencies import Services
from app.domain.exceptions import ConfigurationError
from app.schemas.health import (
    HealthResponse,
    ReadinessErrorResponse,
    ReadinessResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse()


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Primary database unreachable", "model": ReadinessErrorResponse}},
)
async def readiness_check(services: Services) -> ReadinessResponse | JSONResponse:
    """Return 200 when the primary dataset answers SELECT 1, 503 otherwise."""
    try:
        async with services.registry.primary.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError, ConfigurationError) as exc:
        logger.warning("Readiness check failed: %s", exc)
        return JSONResponse(
            status_code=503,
            content=ReadinessErrorResponse(
                message="Primary database unreachable"
            ).model_dump(),
        )
    return ReadinessResponse()
