"""Observability: structlog logging and OpenTelemetry tracing."""

from src.infrastructure.observability.logging_config import (
    add_trace_context,
    configure_logging,
)
from src.infrastructure.observability.tracing import (
    get_current_trace_id,
    get_tracer,
    init_tracing,
    shutdown_tracing,
    traced,
)

__all__ = [
    "add_trace_context",
    "configure_logging",
    "get_current_trace_id",
    "get_tracer",
    "init_tracing",
    "shutdown_tracing",
    "traced",
]
