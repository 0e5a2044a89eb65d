"""Shared setup for command-line scripts."""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

import httpx
from dotenv import load_dotenv

from app.core.config import get_settings
from app.core.container import ServiceContainer, build_services
from app.shared.telemetry import setup_logging


def _project_root() -> Path:
    return Path(__file__).resolve().parent.parent


def load_env() -> None:
    """Load .env from project root so get_settings() sees PRIMARY_DATABASE_URL when run as script."""
    load_dotenv(_project_root() / ".env", override=True)
    get_settings.cache_clear()


@asynccontextmanager
async def script_services() -> AsyncIterator[ServiceContainer]:
    """Service container with its own HTTP client; engines disposed on exit."""
    load_env()
    setup_logging()
    settings = get_settings()
    async with httpx.AsyncClient(timeout=settings.branch_provider_timeout_seconds) as client:
        services = build_services(settings, http_client=client)
        try:
            yield services
        finally:
            await services.close()
