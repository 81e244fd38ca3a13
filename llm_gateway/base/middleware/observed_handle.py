"""Model handle wrapper that runs the middleware chain around a stream."""
from __future__ import annotations

import asyncio
import time
from typing import AsyncIterator, Optional, Sequence

from opentelemetry.trace import Status, StatusCode

from ..errors import describe_exception
from ..interfaces import ModelHandle
from ..logging import LogContext
from ..models import CompletionSettings, CoreMessage, UpstreamDelta
from ..streaming.stream_metrics import StreamMetrics
from ..timeouts import TimeoutConfig, bounded_next
from ..tracing import begin_span
from .chain import ChatMiddlewareChain


class ObservedModelHandle:
    """Wrap a backend handle; deltas and errors pass through unchanged.

    Each call to ``stream`` opens a ``gateway.model.stream`` span, feeds every
    delta to the chain, and reports the end of the stream exactly once with
    its outcome: ``completed`` when upstream is exhausted, ``failed`` when it
    raised (including an expired pull bound), ``cancelled`` when the consumer
    closed the iterator or the task was cancelled.

    ``stream`` accepts ``timeouts``; the pull bounds are then enforced here,
    so a timed-out stream is reported as ``failed`` with a ``timeout`` error.
    ``bounds_pulls`` tells the transport to leave the bounding to this class.
    """

    bounds_pulls = True

    def __init__(self, inner: ModelHandle, chain: ChatMiddlewareChain, ctx: Optional[LogContext] = None) -> None:
        self._inner = inner
        self._chain = chain
        self.provider_id = inner.provider_id
        self.model_id = inner.model_id
        self.ctx = ctx or LogContext(provider=inner.provider_id, model=inner.model_id)

    @property
    def inner(self) -> ModelHandle:
        return self._inner

    async def _next(self, upstream: AsyncIterator[UpstreamDelta], timeouts: Optional[TimeoutConfig], first: bool) -> UpstreamDelta:
        if timeouts is None:
            return await upstream.__anext__()
        return await bounded_next(
            upstream,
            timeouts.for_pull(first),
            provider=self.provider_id,
            model=self.model_id,
        )

    async def stream(
        self,
        messages: Sequence[CoreMessage],
        settings: Optional[CompletionSettings] = None,
        *,
        timeouts: Optional[TimeoutConfig] = None,
    ) -> AsyncIterator[UpstreamDelta]:
        metrics = StreamMetrics()
        outcome = "completed"
        error: Optional[str] = None
        started = time.perf_counter()
        span = begin_span(
            "gateway.model.stream",
            {"gateway.provider": self.provider_id, "gateway.model": self.model_id},
        )
        upstream = None
        try:
            self._chain.run_stream_start(self.ctx)
            upstream = self._inner.stream(messages, settings).__aiter__()
            first = True
            while True:
                try:
                    delta = await self._next(upstream, timeouts, first)
                except StopAsyncIteration:
                    break
                first = False
                if delta.text and metrics.time_to_first_token_ms is None:
                    metrics.time_to_first_token_ms = (time.perf_counter() - started) * 1000.0
                metrics.observe(delta)
                self._chain.run_delta(self.ctx, delta)
                yield delta
        except (GeneratorExit, asyncio.CancelledError):
            outcome = "cancelled"
            raise
        except Exception as exc:
            outcome = "failed"
            error = describe_exception(exc)
            span.record_exception(exc)
            span.set_status(Status(StatusCode.ERROR, error))
            raise
        finally:
            if upstream is not None:
                aclose = getattr(upstream, "aclose", None)
                if aclose is not None:
                    await aclose()
            metrics.total_duration_ms = (time.perf_counter() - started) * 1000.0
            span.set_attribute("gateway.chunks", metrics.emitted)
            span.set_attribute("gateway.outcome", outcome)
            span.end()
            self._chain.run_stream_end(self.ctx, metrics, outcome=outcome, error=error)

    async def aclose(self) -> None:
        await self._inner.aclose()

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return f"ObservedModelHandle(provider={self.provider_id!r}, model={self.model_id!r})"


__all__ = ["ObservedModelHandle"]
