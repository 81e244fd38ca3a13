"""Base class for stream middleware hooks.

Defines the ``Middleware`` base class run by ``ObservedModelHandle`` around
every upstream stream. All hooks are no-ops so implementers override only
what they need.
"""

from __future__ import annotations

from typing import Optional

from ..logging import LogContext
from ..models import UpstreamDelta
from ..streaming.stream_metrics import StreamMetrics


class Middleware:
    """Base middleware with no-op stream hooks.

    Hooks observe the stream; they cannot alter or drop deltas, which always
    reach the transport unchanged and in order.

    Failure modes:
    - An exception raised from ``on_stream_start`` or ``on_delta`` aborts the
      stream and surfaces like an upstream failure.

    Performance notes:
    - ``on_delta`` runs once per delta on the hot path. Keep it fast.
    """

    def on_stream_start(self, ctx: LogContext) -> None:
        """Called before the first upstream pull."""

    def on_delta(self, ctx: LogContext, delta: UpstreamDelta) -> None:
        """Called for every upstream delta, before it is handed on."""

    def on_stream_end(
        self,
        ctx: LogContext,
        metrics: StreamMetrics,
        *,
        outcome: str,
        error: Optional[str] = None,
    ) -> None:
        """Called exactly once when a started stream ends.

        Parameters:
            ctx: Provider/model context of the stream.
            metrics: Final counters and timings.
            outcome: ``"completed"``, ``"failed"`` or ``"cancelled"``.
            error: Sanitized ``"<code>: <message>"`` when ``outcome`` is ``"failed"``.
        """
