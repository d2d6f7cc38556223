"""OpenTelemetry tracing for the gateway.

Modules obtain a tracer with :func:`get_tracer` at import time. Until
:func:`configure_telemetry` installs an SDK provider every span is a no-op,
so instrumented code never depends on the ``otel`` extra.

Spans emitted::

    http.request        one per parsed HTTP request
    mcp.<method>        one per JSON-RPC request
    mcp.tool            the tool call inside ``tools/call``
    homemcp.bridge      one per bridged directory mutation
"""

from __future__ import annotations

from typing import Any

from opentelemetry import trace

# ---------------------------------------------------------------------------
# Span attribute keys
# ---------------------------------------------------------------------------

ATTR_RPC_METHOD = "homemcp.rpc.method"
ATTR_RPC_ID = "homemcp.rpc.id"
ATTR_RPC_ERROR_CODE = "homemcp.rpc.error_code"
ATTR_TOOL_NAME = "homemcp.tool.name"
ATTR_BRIDGE_OPERATION = "homemcp.bridge.operation"
ATTR_BRIDGE_STATUS = "homemcp.bridge.status"
ATTR_HTTP_METHOD = "homemcp.http.method"
ATTR_HTTP_PATH = "homemcp.http.path"

_INSTRUMENTATION_NAME = "homemcp"


def get_tracer(name: str | None = None) -> trace.Tracer:
    """Return a :class:`~opentelemetry.trace.Tracer` for *name*.

    If the OpenTelemetry SDK has not been configured the returned tracer
    is a no-op.
    """
    return trace.get_tracer(name or _INSTRUMENTATION_NAME)


def configure_telemetry(
    *,
    service_name: str = _INSTRUMENTATION_NAME,
    export_to_console: bool = True,
    otlp_endpoint: str | None = None,
) -> None:
    """Install an SDK tracer provider for this process.

    Parameters
    ----------
    service_name:
        Reported as the ``service.name`` resource attribute.
    export_to_console:
        Print finished spans as JSON on stdout.
    otlp_endpoint:
        Also ship spans over OTLP/gRPC to this endpoint.

    Raises
    ------
    ImportError
        If ``opentelemetry-sdk`` (or, with *otlp_endpoint*,
        ``opentelemetry-exporter-otlp``) is missing.
    """
    try:
        from opentelemetry.sdk.resources import Resource  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace import TracerProvider  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace.export import (  # pyright: ignore[reportMissingImports]
            BatchSpanProcessor,
            ConsoleSpanExporter,
            SimpleSpanProcessor,
        )
    except ImportError as exc:
        msg = "opentelemetry-sdk is not installed; install homemcp[otel] to enable tracing"
        raise ImportError(msg) from exc

    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
    if export_to_console:
        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))
    if otlp_endpoint:
        provider.add_span_processor(BatchSpanProcessor(_otlp_exporter(otlp_endpoint)))
    trace.set_tracer_provider(provider)


def _otlp_exporter(endpoint: str) -> Any:
    try:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter  # pyright: ignore[reportMissingImports]
    except ImportError as exc:
        msg = "opentelemetry-exporter-otlp is not installed; install homemcp[otel] for OTLP export"
        raise ImportError(msg) from exc
    return OTLPSpanExporter(endpoint=endpoint)
