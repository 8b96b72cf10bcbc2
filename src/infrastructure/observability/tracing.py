"""OpenTelemetry tracing setup and helpers."""

import inspect
from collections.abc import Callable
from functools import wraps
from typing import TYPE_CHECKING, Any, ParamSpec, TypeVar

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.trace.sampling import ParentBasedTraceIdRatio
from opentelemetry.trace import Span, Status, StatusCode, Tracer

if TYPE_CHECKING:
    from fastapi import FastAPI

P = ParamSpec("P")
R = TypeVar("R")

# Module-level state for cleanup
_tracer_provider: TracerProvider | None = None


def init_tracing(
    service_name: str,
    service_version: str,
    *,
    otlp_endpoint: str | None = None,
    console_export: bool = False,
    sample_rate: float = 1.0,
    app: "FastAPI | None" = None,
) -> None:
    """Install a global tracer provider and optionally instrument FastAPI.

    Calling this more than once is a no-op until ``shutdown_tracing`` runs.

    Args:
        service_name: Name of the service for resource attribution.
        service_version: Version of the service.
        otlp_endpoint: OTLP/HTTP collector base URL, if spans should be exported.
        console_export: If True, print spans to stdout (for development).
        sample_rate: Sampling rate between 0.0 and 1.0.
        app: Optional FastAPI app instance to instrument.
    """
    global _tracer_provider

    if _tracer_provider is not None:
        return

    resource = Resource.create(
        {SERVICE_NAME: service_name, SERVICE_VERSION: service_version}
    )
    _tracer_provider = TracerProvider(
        resource=resource, sampler=ParentBasedTraceIdRatio(sample_rate)
    )

    if console_export:
        _tracer_provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    if otlp_endpoint:
        exporter = OTLPSpanExporter(endpoint=f"{otlp_endpoint}/v1/traces")
        _tracer_provider.add_span_processor(BatchSpanProcessor(exporter))

    trace.set_tracer_provider(_tracer_provider)

    if app is not None:
        from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

        FastAPIInstrumentor.instrument_app(app)


def shutdown_tracing() -> None:
    """Flush pending spans and release the tracer provider."""
    global _tracer_provider

    if _tracer_provider is not None:
        _tracer_provider.shutdown()
        _tracer_provider = None


def get_tracer(name: str) -> Tracer:
    """Get a tracer for the given module name."""
    return trace.get_tracer(name)


def get_current_trace_id() -> str | None:
    """Return the active trace ID as 32 hex characters, or None."""
    span_context = trace.get_current_span().get_span_context()
    if span_context.is_valid:
        return format(span_context.trace_id, "032x")
    return None


def _finish(span: Span, error: Exception | None) -> None:
    if error is None:
        span.set_status(Status(StatusCode.OK))
    else:
        span.record_exception(error)
        span.set_status(Status(StatusCode.ERROR, type(error).__name__))


def traced(
    span_name: str | None = None,
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Decorator that runs a sync or async function inside a span.

    Exceptions are recorded on the span and re-raised; the span status
    carries only the exception type name.

    Args:
        span_name: Name for the span (defaults to the function's qualname).

    Examples:
        @traced("auth.login")
        async def login(...):
            ...
    """

    def decorator(fn: Callable[P, R]) -> Callable[P, R]:
        name = span_name or fn.__qualname__

        if inspect.iscoroutinefunction(fn):

            @wraps(fn)
            async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> Any:
                tracer = get_tracer(fn.__module__)
                with tracer.start_as_current_span(
                    name, record_exception=False, set_status_on_exception=False
                ) as span:
                    try:
                        result = await fn(*args, **kwargs)  # type: ignore[misc]
                    except Exception as e:
                        _finish(span, e)
                        raise
                    _finish(span, None)
                    return result

            return async_wrapper  # type: ignore[return-value]

        @wraps(fn)
        def sync_wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            tracer = get_tracer(fn.__module__)
            with tracer.start_as_current_span(
                name, record_exception=False, set_status_on_exception=False
            ) as span:
                try:
                    result = fn(*args, **kwargs)
                except Exception as e:
                    _finish(span, e)
                    raise
                _finish(span, None)
                return result

        return sync_wrapper

    return decorator
