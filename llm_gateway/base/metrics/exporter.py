"""Metrics exporter interface and default implementations.

Purpose
-------
- Provide a small contract for emitting per-stream metrics to external
  systems without coupling the middleware to any particular backend.

Design
------
- ``MetricsExporter`` with a single ``emit_stream_metrics`` method.
- ``NoOpMetricsExporter`` is the default; ``LoggingMetricsExporter`` writes a
  ``metrics.stream`` structured event and is selected with
  ``GATEWAY_METRICS_EXPORT=1``; ``InMemoryMetricsExporter`` collects payloads
  for tests and local inspection.

Failure Modes
-------------
- Callers treat emission as best-effort: exporter failures are suppressed by
  the middleware and never reach the stream consumer.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from threading import Lock
from typing import Any, List, Mapping, Optional

from ..logging import get_logger, log_event

METRICS_EXPORT_ENV = "GATEWAY_METRICS_EXPORT"


@dataclass
class StreamMetricsPayload:
    """Serialized per-stream metrics.

    Attributes:
        provider: Provider identifier.
        model: Model identifier.
        emitted_count: Number of text-bearing deltas (non-terminal chunks).
        time_to_first_token_ms: Latency to the first delta in milliseconds.
        total_duration_ms: Wall-clock stream duration in milliseconds.
        tokens: Mapping with keys ``prompt``, ``completion``, ``total`` when known.
        outcome: ``"completed"``, ``"failed"`` or ``"cancelled"``.
        error: Sanitized error string when the stream failed.
    """

    provider: str
    model: str
    emitted_count: int
    time_to_first_token_ms: Optional[float]
    total_duration_ms: Optional[float]
    tokens: Optional[Mapping[str, Any]]
    outcome: str = "completed"
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


class MetricsExporter:
    """Minimal metrics exporter contract."""

    def emit_stream_metrics(self, payload: StreamMetricsPayload) -> None:  # pragma: no cover - interface
        """Emit a single streaming metrics payload downstream."""
        raise NotImplementedError


class NoOpMetricsExporter(MetricsExporter):
    """Default exporter that does nothing."""

    def emit_stream_metrics(self, payload: StreamMetricsPayload) -> None:  # noqa: D401 - trivial
        return


class LoggingMetricsExporter(MetricsExporter):
    """Write each payload as a ``metrics.stream`` structured log event."""

    def __init__(self) -> None:
        self._logger = get_logger("llm_gateway.metrics")

    def emit_stream_metrics(self, payload: StreamMetricsPayload) -> None:
        log_event(self._logger, "metrics.stream", **payload.to_dict())


class InMemoryMetricsExporter(MetricsExporter):
    """Collect payloads in memory (tests, local debugging)."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._payloads: List[StreamMetricsPayload] = []

    def emit_stream_metrics(self, payload: StreamMetricsPayload) -> None:
        with self._lock:
            self._payloads.append(payload)

    @property
    def payloads(self) -> List[StreamMetricsPayload]:
        with self._lock:
            return list(self._payloads)


def get_default_exporter(environ: Optional[Mapping[str, str]] = None) -> MetricsExporter:
    """Return the exporter selected by ``GATEWAY_METRICS_EXPORT``.

    ``1``/``true``/``yes`` selects ``LoggingMetricsExporter``; anything else the
    no-op exporter.
    """
    flag = (environ or {}).get(METRICS_EXPORT_ENV, "")
    if flag.strip().lower() in {"1", "true", "yes"}:
        return LoggingMetricsExporter()
    return NoOpMetricsExporter()


__all__ = [
    "StreamMetricsPayload",
    "MetricsExporter",
    "NoOpMetricsExporter",
    "LoggingMetricsExporter",
    "InMemoryMetricsExporter",
    "get_default_exporter",
    "METRICS_EXPORT_ENV",
]
