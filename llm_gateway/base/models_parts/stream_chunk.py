"""
Outgoing stream chunk and finish reasons.

Within one stream ``sequence_index`` starts at 0 and increases by exactly one
per chunk. Exactly one chunk carries a finish reason and it is the last one;
cancelled streams end without such a chunk.

``FinishReason.CANCELLED`` is never carried by a chunk; it reports a drained
stream that was cancelled (``ChatGateway.complete``).
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class FinishReason(str, Enum):
    STOP = "stop"
    LENGTH = "length"
    ERROR = "error"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class StreamChunk:
    """A single unit delivered to the consumer.

    Attributes:
        sequence_index: 0-based, gap-free position within the stream.
        delta: Text produced since the previous chunk (empty on terminal
            chunks).
        finish_reason: Set only on the terminal chunk.
        error: Sanitized ``"<code>: <message>"`` description, set only when
            ``finish_reason`` is ``FinishReason.ERROR``.
    """

    sequence_index: int
    delta: str = ""
    finish_reason: Optional[FinishReason] = None
    error: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.finish_reason is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sequence_index": self.sequence_index,
            "delta": self.delta,
            "finish_reason": self.finish_reason.value if self.finish_reason else None,
            "error": self.error,
        }


__all__ = ["FinishReason", "StreamChunk"]
