"""Lifecycle states of a streaming transport."""
from __future__ import annotations

from enum import Enum


class StreamState(str, Enum):
    IDLE = "idle"
    STREAMING = "streaming"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"

    @property
    def is_final(self) -> bool:
        return self in (StreamState.COMPLETED, StreamState.CANCELLED, StreamState.FAILED)


__all__ = ["StreamState"]
