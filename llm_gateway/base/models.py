"""
Provider-agnostic domain models public surface.

Re-exports the one-class-per-file implementations under
``llm_gateway.base.models_parts``.
"""

from .models_parts.content_part import ContentPart, ContentPartType, TEXT_PART
from .models_parts.conversation_turn import ConversationTurn, Role
from .models_parts.core_message import CoreMessage
from .models_parts.completion_settings import CompletionSettings
from .models_parts.provider_descriptor import ProviderDescriptor
from .models_parts.upstream_delta import UpstreamDelta, UpstreamFinish
from .models_parts.stream_chunk import FinishReason, StreamChunk
from .models_parts.routing_trace import RoutingTrace
from .models_parts.route_result import RouteResult

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
