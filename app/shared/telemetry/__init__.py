"""Shared telemetry: logging setup, OpenTelemetry config, and tracing helpers."""

from app.shared.telemetry.logging import TenantContextFilter, setup_logging
from app.shared.telemetry.telemetry import (
    TelemetryConfig,
    get_telemetry,
    instrument_engine,
    set_telemetry,
)
from app.shared.telemetry.tracing import (
    add_span_attributes,
    add_span_event,
    set_span_error,
    traced,
)

__all__ = [
    "setup_logging",
    "TenantContextFilter",
    "TelemetryConfig",
    "get_telemetry",
    "set_telemetry",
    "instrument_engine",
    "traced",
    "add_span_attributes",
    "add_span_event",
    "set_span_error",
]
