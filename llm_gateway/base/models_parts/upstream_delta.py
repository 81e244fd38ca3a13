"""Raw incremental unit produced by a provider backend."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

UpstreamFinish = Literal["stop", "length"]


@dataclass(frozen=True)
class UpstreamDelta:
    """One piece of upstream output.

    ``index`` is whatever the provider reported; the transport assigns its own
    sequence numbers and ignores it. Token counts are cumulative when the
    provider reports them more than once.
    """

    text: str = ""
    finish_reason: Optional[UpstreamFinish] = None
    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None
    index: Optional[int] = None


__all__ = ["UpstreamDelta", "UpstreamFinish"]
