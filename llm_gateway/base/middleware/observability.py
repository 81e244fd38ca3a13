"""Observability middleware: structured stream events plus metrics export."""
from __future__ import annotations

import logging
from typing import Optional

from ..logging import LogContext, get_logger, log_event, normalized_log_event
from ..metrics.exporter import MetricsExporter, NoOpMetricsExporter, StreamMetricsPayload
from ..streaming.stream_metrics import StreamMetrics
from .middleware_base import Middleware


class ObservabilityMiddleware(Middleware):
    """Emit ``model.stream.start`` / ``model.stream.end`` and export metrics.

    The end event carries provider id, model id, wall-clock duration, chunk
    count, token usage and outcome. Exporter failures are logged and never
    reach the stream.
    """

    def __init__(
        self,
        exporter: Optional[MetricsExporter] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.exporter = exporter or NoOpMetricsExporter()
        self.logger = logger or get_logger("llm_gateway.middleware")

    def on_stream_start(self, ctx: LogContext) -> None:
        normalized_log_event(self.logger, "model.stream.start", ctx, phase="start", attempt=1, emitted=False)

    def on_stream_end(
        self,
        ctx: LogContext,
        metrics: StreamMetrics,
        *,
        outcome: str,
        error: Optional[str] = None,
    ) -> None:
        error_code = error.split(":", 1)[0] if error else None
        normalized_log_event(
            self.logger,
            "model.stream.end",
            ctx,
            phase="finalize",
            attempt=1,
            error_code=error_code,
            emitted=metrics.emitted > 0,
            tokens=metrics.tokens,
            level=logging.WARNING if outcome == "failed" else logging.INFO,
            outcome=outcome,
            chunks=metrics.emitted,
            duration_ms=metrics.total_duration_ms,
            time_to_first_token_ms=metrics.time_to_first_token_ms,
            error=error,
        )
        payload = StreamMetricsPayload(
            provider=ctx.provider or "unknown",
            model=ctx.model or "unknown",
            emitted_count=metrics.emitted,
            time_to_first_token_ms=metrics.time_to_first_token_ms,
            total_duration_ms=metrics.total_duration_ms,
            tokens=metrics.tokens,
            outcome=outcome,
            error=error,
        )
        try:
            self.exporter.emit_stream_metrics(payload)
        except Exception as exc:  # noqa: BLE001 - export is best-effort
            log_event(
                self.logger,
                "metrics.export.failed",
                ctx,
                level=logging.WARNING,
                exporter=type(self.exporter).__name__,
                error=str(exc),
            )


__all__ = ["ObservabilityMiddleware"]
