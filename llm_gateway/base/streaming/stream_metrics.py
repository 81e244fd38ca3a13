"""Per-stream metrics collected by the observed model handle."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from ..models import UpstreamDelta


@dataclass
class StreamMetrics:
    """Counters and timings of one upstream stream.

    ``emitted`` counts deltas that carry text, matching the
    non-terminal chunks of a stream that runs to its end; usage-only and
    empty deltas are not counted. Token counts keep the last value reported.
    ``time_to_first_token_ms`` is measured to the first text delta.
    """

    emitted: int = 0
    time_to_first_token_ms: Optional[float] = None
    total_duration_ms: Optional[float] = None
    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None

    def observe(self, delta: UpstreamDelta) -> None:
        if delta.text:
            self.emitted += 1
        if delta.prompt_tokens is not None:
            self.prompt_tokens = delta.prompt_tokens
        if delta.completion_tokens is not None:
            self.completion_tokens = delta.completion_tokens

    @property
    def tokens(self) -> Optional[Dict[str, Optional[int]]]:
        if self.prompt_tokens is None and self.completion_tokens is None:
            return None
        return build_token_usage(self.prompt_tokens, self.completion_tokens)


def build_token_usage(prompt: Optional[int], completion: Optional[int], total: Optional[int] = None) -> Dict[str, Optional[int]]:
    """Return a canonical token usage mapping."""
    derived_total = total
    if derived_total is None and (prompt is not None and completion is not None):
        derived_total = prompt + completion
    return {"prompt": prompt, "completion": completion, "total": derived_total}


__all__ = ["StreamMetrics", "build_token_usage"]
