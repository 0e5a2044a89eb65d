"""Logging configuration for the application."""

import logging
import sys

from app.core.config import get_settings
from app.core.tenant_context import get_tenant_id


class TenantContextFilter(logging.Filter):
    """Stamp each record with the tenant id of the current request context."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "tenant_id"):
            record.tenant_id = get_tenant_id()
        return True


def setup_logging() -> None:
    """Configure application-wide logging.

    Level is DEBUG when settings.debug is True, otherwise INFO.
    Output goes to stdout; every line carries the resolved tenant id.
    """
    settings = get_settings()
    log_level = logging.DEBUG if settings.debug else logging.INFO
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(TenantContextFilter())
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - [tenant=%(tenant_id)s] %(message)s",
        handlers=[handler],
    )

