"""Result of a successful routing decision."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Tuple

from .core_message import CoreMessage
from .routing_trace import RoutingTrace

if TYPE_CHECKING:
    from ..interfaces_parts.model_handle import ModelHandle


@dataclass(frozen=True)
class RouteResult:
    """Handle ready to stream, plus the trace and normalized messages."""

    handle: "ModelHandle"
    trace: RoutingTrace
    messages: Tuple[CoreMessage, ...]

    @property
    def provider_id(self) -> str:
        return self.handle.provider_id

    @property
    def model_id(self) -> str:
        return self.handle.model_id


__all__ = ["RouteResult"]
