"""Anthropic backend.

Streams with ``AsyncAnthropic().messages.stream(...)``. Token usage comes
from the ``message_start`` (input) and ``message_delta`` (output) events;
a ``max_tokens`` stop reason is reported as ``length`` truncation.

SDK retries are disabled (``max_retries=0``); the gateway never retries
silently.
"""

from __future__ import annotations

from typing import Any, AsyncIterator, Callable, Optional, Sequence

from anthropic import AsyncAnthropic

from ..base.errors import MissingCredentialError
from ..base.models import CompletionSettings, CoreMessage, ProviderDescriptor, UpstreamDelta
from .stream_helpers import build_message_params, translate_stream_event

__all__ = ["AnthropicBackend", "AnthropicHandle"]


class AnthropicHandle:
    """Request-scoped handle owning one ``AsyncAnthropic`` client."""

    def __init__(self, provider_id: str, model_id: str, client: Any) -> None:
        self.provider_id = provider_id
        self.model_id = model_id
        self._client = client
        self._closed = False

    async def stream(
        self,
        messages: Sequence[CoreMessage],
        settings: Optional[CompletionSettings] = None,
    ) -> AsyncIterator[UpstreamDelta]:
        params = build_message_params(self.model_id, messages, settings)
        async with self._client.messages.stream(**params) as events:
            async for event in events:
                delta = translate_stream_event(event)
                if delta is not None:
                    yield delta

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._client.close()


class AnthropicBackend:
    """Build ``AnthropicHandle`` instances; ``client_factory`` replaces the SDK client in tests."""

    def __init__(self, descriptor: ProviderDescriptor, client_factory: Optional[Callable[..., Any]] = None) -> None:
        self._descriptor = descriptor
        self._client_factory = client_factory or self._make_client

    @staticmethod
    def _make_client(*, api_key: str, base_url: Optional[str]) -> Any:
        return AsyncAnthropic(api_key=api_key, base_url=base_url, max_retries=0)

    def build(self, model_id: str, credential: Optional[str]) -> AnthropicHandle:
        if not credential:
            raise MissingCredentialError(self._descriptor.id, self._descriptor.credential_key, model_id)
        client = self._client_factory(api_key=credential, base_url=self._descriptor.base_url)
        return AnthropicHandle(self._descriptor.id, model_id, client)
