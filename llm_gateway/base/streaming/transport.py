"""Streaming Transport.

Drives one ``ModelHandle`` and turns its upstream deltas into the ordered
``StreamChunk`` sequence seen by the consumer.

Lifecycle
---------
``idle`` -> ``streaming`` on the first pull, then exactly one of:

* ``completed``: upstream exhausted; a terminal chunk with ``stop`` (or
  ``length`` when upstream reported truncation) is emitted.
* ``failed``: upstream raised (including start and idle timeouts); a terminal
  ``error`` chunk carries the sanitized ``"<code>: <message>"`` description.
  Timeouts use the ``timeout`` code.
* ``cancelled``: the token was cancelled, the consumer closed the iterator,
  or the surrounding task was cancelled; nothing further is emitted.

Backpressure is pull-based: one upstream pull per consumer request, nothing
is prefetched or buffered. On every exit path the upstream iterator and the
handle are closed exactly once.

Pull bounds are applied with ``bounded_next``. A handle that sets
``bounds_pulls`` (the observed handle built by the factory) receives the
``TimeoutConfig`` and bounds its own pulls, so its middleware sees the
timeout as a failure rather than as a cancellation.
"""
from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator, Awaitable, Callable, Dict, Optional, Sequence

from ..cancellation import CancellationToken
from ..errors import describe_exception
from ..interfaces import ModelHandle
from ..logging import LogContext, get_logger, log_event, normalized_log_event
from ..models import (
    CompletionSettings,
    CoreMessage,
    FinishReason,
    RoutingTrace,
    StreamChunk,
    UpstreamDelta,
)
from ..timeouts import TimeoutConfig, bounded_next
from .stream_metrics import build_token_usage
from .stream_state import StreamState

ChunkSink = Callable[[StreamChunk], Awaitable[None]]


class StreamingTransport:
    """Single-use async iterable of ``StreamChunk`` values.

    Responsibilities:
      * Check cancellation before every upstream pull.
      * Bound the first pull by the start timeout and later pulls by the
        stream (idle) timeout.
      * Assign gap-free sequence indices and drop empty non-terminal deltas.
      * Release upstream resources on every exit path.
    """

    def __init__(
        self,
        handle: ModelHandle,
        messages: Sequence[CoreMessage],
        settings: Optional[CompletionSettings] = None,
        cancellation_token: Optional[CancellationToken] = None,
        timeouts: Optional[TimeoutConfig] = None,
        trace: Optional[RoutingTrace] = None,
        *,
        ctx: Optional[LogContext] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._handle = handle
        self._messages = tuple(messages)
        self._settings = settings
        self._token = cancellation_token or CancellationToken()
        self._timeouts = timeouts or TimeoutConfig()
        self._trace = trace
        self._ctx = (ctx or LogContext()).bind(provider=handle.provider_id, model=handle.model_id)
        self._logger = logger or get_logger("llm_gateway.streaming")
        self._state = StreamState.IDLE
        self._iterated = False
        self._generator: Optional[AsyncIterator[StreamChunk]] = None
        self._upstream: Optional[AsyncIterator[UpstreamDelta]] = None
        self._upstream_closed = False
        self._handle_closed = False
        self._emitted = 0
        self._terminal: Optional[StreamChunk] = None
        self._failure: Optional[Exception] = None
        self._self_bounded = True
        self._prompt_tokens: Optional[int] = None
        self._completion_tokens: Optional[int] = None

    # API -----------------------------------------------------------------
    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def trace(self) -> Optional[RoutingTrace]:
        return self._trace

    @property
    def handle(self) -> ModelHandle:
        return self._handle

    @property
    def cancellation_token(self) -> CancellationToken:
        return self._token

    @property
    def terminal_chunk(self) -> Optional[StreamChunk]:
        """Terminal chunk, once emitted (``None`` for cancelled streams)."""
        return self._terminal

    @property
    def error(self) -> Optional[str]:
        return self._terminal.error if self._terminal else None

    @property
    def failure(self) -> Optional[Exception]:
        """Exception that failed the stream, if any."""
        return self._failure

    @property
    def usage(self) -> Optional[Dict[str, Optional[int]]]:
        """Token usage reported by the upstream so far, or ``None``."""
        if self._prompt_tokens is None and self._completion_tokens is None:
            return None
        return build_token_usage(self._prompt_tokens, self._completion_tokens)

    def cancel(self, reason: Optional[str] = None) -> None:
        """Request cooperative cancellation; observed before the next pull."""
        self._token.cancel(reason or "cancelled by caller")

    def __aiter__(self) -> AsyncIterator[StreamChunk]:
        if self._iterated:
            raise RuntimeError("StreamingTransport can only be iterated once")
        self._iterated = True
        self._generator = self._run()
        return self._generator

    async def deliver(self, sink: ChunkSink) -> StreamState:
        """Push every chunk into ``sink``, awaiting it before the next pull.

        An exception raised by the sink ends the stream as cancelled and
        propagates to the caller after resources are released.
        """
        stream = self.__aiter__()
        try:
            async for chunk in stream:
                await sink(chunk)
        finally:
            await stream.aclose()  # type: ignore[attr-defined]
        return self._state

    async def aclose(self) -> None:
        """Abandon the stream and release resources (safe at any point)."""
        self._iterated = True
        if self._generator is not None:
            await self._generator.aclose()  # type: ignore[attr-defined]
        if self._state is StreamState.IDLE:
            self._state = StreamState.CANCELLED
        await self._release()

    # Internals -----------------------------------------------------------
    def _open_upstream(self) -> AsyncIterator[UpstreamDelta]:
        if getattr(self._handle, "bounds_pulls", False):
            self._self_bounded = False
            return self._handle.stream(self._messages, self._settings, timeouts=self._timeouts)  # type: ignore[call-arg]
        return self._handle.stream(self._messages, self._settings)

    async def _pull(self, first: bool) -> UpstreamDelta:
        assert self._upstream is not None
        if not self._self_bounded:
            return await self._upstream.__anext__()
        return await bounded_next(
            self._upstream,
            self._timeouts.for_pull(first),
            provider=self._handle.provider_id,
            model=self._handle.model_id,
        )

    def _record_usage(self, delta: UpstreamDelta) -> None:
        if delta.prompt_tokens is not None:
            self._prompt_tokens = delta.prompt_tokens
        if delta.completion_tokens is not None:
            self._completion_tokens = delta.completion_tokens

    def _chunk(self, delta: str = "", finish: Optional[FinishReason] = None, error: Optional[str] = None) -> StreamChunk:
        chunk = StreamChunk(sequence_index=self._emitted, delta=delta, finish_reason=finish, error=error)
        self._emitted += 1
        if finish is not None:
            self._terminal = chunk
        return chunk

    async def _run(self) -> AsyncIterator[StreamChunk]:
        truncated = False
        try:
            if self._token.cancelled:
                self._state = StreamState.CANCELLED
                return
            self._state = StreamState.STREAMING
            self._upstream = self._open_upstream().__aiter__()
            first = True
            while True:
                if self._token.cancelled:
                    self._state = StreamState.CANCELLED
                    return
                try:
                    delta = await self._pull(first)
                except StopAsyncIteration:
                    break
                first = False
                self._record_usage(delta)
                if delta.finish_reason == "length":
                    truncated = True
                if self._token.cancelled:
                    self._state = StreamState.CANCELLED
                    return
                if not delta.text:
                    continue
                yield self._chunk(delta.text)
            self._state = StreamState.COMPLETED
            yield self._chunk(finish=FinishReason.LENGTH if truncated else FinishReason.STOP)
        except (GeneratorExit, asyncio.CancelledError):
            if self._state is StreamState.STREAMING:
                self._state = StreamState.CANCELLED
            raise
        except Exception as exc:
            self._state = StreamState.FAILED
            self._failure = exc
            yield self._chunk(finish=FinishReason.ERROR, error=describe_exception(exc))
        finally:
            await self._release()
            self._log_end()

    async def _release(self) -> None:
        upstream, self._upstream = self._upstream, None
        if upstream is not None and not self._upstream_closed:
            self._upstream_closed = True
            aclose = getattr(upstream, "aclose", None)
            if aclose is not None:
                await self._close_quietly("upstream", aclose)
        if not self._handle_closed:
            self._handle_closed = True
            await self._close_quietly("handle", self._handle.aclose)
        self._token.detach()

    async def _close_quietly(self, what: str, closer: Callable[[], Awaitable[None]]) -> None:
        try:
            await closer()
        except Exception as exc:  # noqa: BLE001 - release failures must not mask the stream outcome
            log_event(
                self._logger,
                "stream.release.failed",
                self._ctx,
                level=logging.WARNING,
                resource=what,
                error=describe_exception(exc),
            )

    def _log_end(self) -> None:
        error = self.error
        normalized_log_event(
            self._logger,
            "stream.transport.end",
            self._ctx,
            phase="finalize",
            error_code=error.split(":", 1)[0] if error else None,
            emitted=self._emitted > 0,
            level=logging.WARNING if self._state is StreamState.FAILED else logging.INFO,
            state=self._state.value,
            chunks=self._emitted,
            cancel_reason=self._token.reason if self._state is StreamState.CANCELLED else None,
            trace=self._trace.to_dict() if self._trace else None,
        )


__all__ = ["StreamingTransport", "ChunkSink"]
