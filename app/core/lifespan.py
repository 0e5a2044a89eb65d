"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic (SRP). Used by main.py;
no business logic here, only wiring of infrastructure (cache, telemetry,
the shared HTTP client and the service container).
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import get_settings
from app.core.constants import PRIMARY_TENANT_ID
from app.core.container import build_services
from app.infrastructure.persistence.schema import PRIMARY_FULL, SET_PRIMARY_FULL

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: telemetry (if enabled, so engines built afterwards are
    instrumented), Redis cache (if enabled), shared HTTP client, services,
    primary schema convergence and tenant-0 default settings. Shutdown order: engines, HTTP client,
    cache, telemetry.
    """
    settings = get_settings()

    # ---- Startup ----
    if settings.telemetry_enabled:
        from app.shared.telemetry.telemetry import TelemetryConfig, set_telemetry

        telemetry = TelemetryConfig(
            service_name=settings.app_name,
            service_version=settings.app_version,
            enabled=True,
            environment=settings.telemetry_environment,
        )
        telemetry.setup_telemetry(
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )
        set_telemetry(telemetry)
        telemetry.instrument_fastapi(app)
        logger.info("Telemetry initialized")

    cache = None
    if settings.redis_enabled:
        from app.infrastructure.cache.redis_cache import CacheService

        cache = CacheService()
        await cache.connect()
    app.state.cache = cache

    # Shared HTTP client for the branch provider (connection reuse).
    app.state.http_client = httpx.AsyncClient(timeout=settings.branch_provider_timeout_seconds)
    services = build_services(settings, http_client=app.state.http_client, cache=cache)
    app.state.services = services

    if settings.schema_ensure_on_startup:
        result = await services.schema_engine.ensure(
            services.registry.primary, PRIMARY_FULL, set_name=SET_PRIMARY_FULL
        )
        if result.failed:
            logger.warning(
                "Primary schema not fully converged (%d statement(s) failed)",
                len(result.failed),
            )
        try:
            await services.settings_service.ensure_defaults(PRIMARY_TENANT_ID)
        except SQLAlchemyError as exc:
            logger.warning("Default settings backfill for tenant 0 failed: %s", exc)

    yield

    # ---- Shutdown ----
    await services.close()
    logger.info("Database engines disposed")

    await app.state.http_client.aclose()
    app.state.http_client = None

    if cache is not None:
        await cache.disconnect()
        logger.info("Cache disconnected")

    from app.shared.telemetry.telemetry import get_telemetry

    telemetry_instance = get_telemetry()
    if telemetry_instance is not None:
        telemetry_instance.shutdown()
