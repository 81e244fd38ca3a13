"""Models parts package public surface.

Re-exports the individual DTOs; ``llm_gateway.base.models`` remains the
primary import path.
"""

from .content_part import ContentPart, ContentPartType, TEXT_PART
from .conversation_turn import ConversationTurn, Role
from .core_message import CoreMessage
from .completion_settings import CompletionSettings
from .provider_descriptor import ProviderDescriptor
from .upstream_delta import UpstreamDelta, UpstreamFinish
from .stream_chunk import FinishReason, StreamChunk
from .routing_trace import RoutingTrace
from .route_result import RouteResult

__all__ = [
    "ContentPart",
    "ContentPartType",
    "TEXT_PART",
    "ConversationTurn",
    "Role",
    "CoreMessage",
    "CompletionSettings",
    "ProviderDescriptor",
    "UpstreamDelta",
    "UpstreamFinish",
    "FinishReason",
    "StreamChunk",
    "RoutingTrace",
    "RouteResult",
]
