"""llm_gateway: one streaming chat interface over several LLM providers.

Typical use::

    from llm_gateway import ConversationTurn, StreamRequest, build_gateway

    gateway = build_gateway()
    request = StreamRequest(turns=(ConversationTurn.text("user", "Hi"),))
    async for chunk in gateway.stream(request):
        print(chunk.delta, end="")
"""

from .base.cancellation import CancellationToken, CancelledError
from .base.errors import (
    AllProvidersFailedError,
    EmptyTurnError,
    ErrorCode,
    MissingCredentialError,
    NoProviderConfiguredError,
    ProviderError,
    RegistryConfigError,
    UnknownProviderError,
    UnsupportedModelError,
    UnsupportedPartKindError,
)
from .base.models import (
    CompletionSettings,
    ContentPart,
    ConversationTurn,
    CoreMessage,
    FinishReason,
    ProviderDescriptor,
    RoutingTrace,
    StreamChunk,
)
from .base.streaming import StreamingTransport, StreamState
from .config import GatewayConfig, load_gateway_config
from .di import GatewayContainer, build_container, build_gateway
from .gateway import ChatGateway, Completion, ModelValidation, StreamRequest

__version__ = "0.1.0"

__all__ = [
    "CancellationToken",
    "CancelledError",
    "AllProvidersFailedError",
    "EmptyTurnError",
    "ErrorCode",
    "MissingCredentialError",
    "NoProviderConfiguredError",
    "ProviderError",
    "RegistryConfigError",
    "UnknownProviderError",
    "UnsupportedModelError",
    "UnsupportedPartKindError",
    "CompletionSettings",
    "ContentPart",
    "ConversationTurn",
    "CoreMessage",
    "FinishReason",
    "ProviderDescriptor",
    "RoutingTrace",
    "StreamChunk",
    "StreamingTransport",
    "StreamState",
    "GatewayConfig",
    "load_gateway_config",
    "GatewayContainer",
    "build_container",
    "build_gateway",
    "ChatGateway",
    "Completion",
    "ModelValidation",
    "StreamRequest",
]
