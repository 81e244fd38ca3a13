"""Middleware chain for stream hooks."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from ..logging import LogContext
from ..models import UpstreamDelta
from ..streaming.stream_metrics import StreamMetrics
from .middleware_base import Middleware


@dataclass
class ChatMiddlewareChain:
    """Composable chain executing middleware hooks in order.

    Attributes:
        items: Ordered list of middleware objects to execute.
    """

    items: List[Middleware] = field(default_factory=list)

    def run_stream_start(self, ctx: LogContext) -> None:
        for m in self.items:
            m.on_stream_start(ctx)

    def run_delta(self, ctx: LogContext, delta: UpstreamDelta) -> None:
        for m in self.items:
            m.on_delta(ctx, delta)

    def run_stream_end(
        self,
        ctx: LogContext,
        metrics: StreamMetrics,
        *,
        outcome: str,
        error: Optional[str] = None,
    ) -> None:
        """Run ``on_stream_end`` across the chain in order."""
        for m in self.items:
            m.on_stream_end(ctx, metrics, outcome=outcome, error=error)


__all__ = ["ChatMiddlewareChain"]
