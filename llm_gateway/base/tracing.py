"""Tracing facade over the OpenTelemetry API.

Spans are no-ops until the host process installs an OpenTelemetry SDK
tracer provider, so annotating streams costs nothing in the default setup.

Usage:

    with start_span("gateway.route") as span:
        span.set_attribute("gateway.provider", "openai")

Spans that outlive a single synchronous block (a stream consumed across
many awaits) use ``begin_span`` and must be ended explicitly; they are not
made current, so resuming the stream from another task is safe.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional

from opentelemetry import trace

SERVICE_NAME = "llm_gateway"


def get_tracer(service_name: str = SERVICE_NAME) -> trace.Tracer:
    """Return the tracer registered for ``service_name``."""
    return trace.get_tracer(service_name)


def start_span(name: str, *, service_name: str = SERVICE_NAME):
    """Start a span and make it current for the ``with`` block.

    Returns the context manager from ``Tracer.start_as_current_span``; the
    yielded span exposes ``set_attribute``, ``record_exception`` and
    ``set_status``.
    """
    return get_tracer(service_name).start_as_current_span(name)


def begin_span(
    name: str,
    attributes: Optional[Mapping[str, Any]] = None,
    *,
    service_name: str = SERVICE_NAME,
) -> trace.Span:
    """Start a detached span; the caller must call ``span.end()``."""
    return get_tracer(service_name).start_span(name, attributes=dict(attributes or {}))


__all__ = ["get_tracer", "start_span", "begin_span", "SERVICE_NAME"]
