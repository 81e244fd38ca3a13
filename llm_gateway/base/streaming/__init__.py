"""Streaming package: transport, lifecycle states and per-stream metrics."""

from .stream_metrics import StreamMetrics, build_token_usage
from .stream_state import StreamState
from .transport import ChunkSink, StreamingTransport

__all__ = ["StreamingTransport", "StreamState", "StreamMetrics", "ChunkSink", "build_token_usage"]
