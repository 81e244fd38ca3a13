"""Metrics package public surface."""

from .exporter import (
    InMemoryMetricsExporter,
    LoggingMetricsExporter,
    MetricsExporter,
    NoOpMetricsExporter,
    StreamMetricsPayload,
    get_default_exporter,
)

__all__ = [
    "StreamMetricsPayload",
    "MetricsExporter",
    "NoOpMetricsExporter",
    "LoggingMetricsExporter",
    "InMemoryMetricsExporter",
    "get_default_exporter",
]
