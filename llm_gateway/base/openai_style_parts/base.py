"""OpenAI-compatible backend and model handle.

Purpose:
- One reusable implementation for every provider that speaks the OpenAI
  Chat Completions protocol (OpenAI, Groq, OpenRouter, Ollama, custom). Concrete
  backends only supply an ``OpenAIStyleInit``.

External dependencies:
- ``openai`` SDK (``AsyncOpenAI``). The client is created at build time,
  which performs no network I/O; the request starts on the first pull.

Retry semantics:
- SDK retries are disabled (``max_retries=0``); failures surface to the
  transport unchanged and are never retried silently.
"""

from __future__ import annotations

from typing import Any, AsyncIterator, Callable, Optional, Sequence

from openai import AsyncOpenAI

from ..errors import MissingCredentialError
from ..models import CompletionSettings, CoreMessage, ProviderDescriptor, UpstreamDelta
from .client_protocol import ChatCompletionsClient
from .provider_init import OpenAIStyleInit
from .style_helpers import build_stream_params, sanitize_base_url, translate_chunk

ClientFactory = Callable[..., ChatCompletionsClient]


class OpenAIStyleHandle:
    """Request-scoped handle owning one async SDK client."""

    def __init__(
        self,
        provider_id: str,
        model_id: str,
        client: ChatCompletionsClient,
        *,
        include_usage: bool = False,
        supports_top_k: bool = False,
    ) -> None:
        self.provider_id = provider_id
        self.model_id = model_id
        self._client = client
        self._include_usage = include_usage
        self._supports_top_k = supports_top_k
        self._closed = False

    async def stream(
        self,
        messages: Sequence[CoreMessage],
        settings: Optional[CompletionSettings] = None,
    ) -> AsyncIterator[UpstreamDelta]:
        params = build_stream_params(
            self.model_id,
            messages,
            settings,
            include_usage=self._include_usage,
            supports_top_k=self._supports_top_k,
        )
        response = await self._client.chat.completions.create(**params)
        try:
            async for chunk in response:
                delta = translate_chunk(chunk)
                if delta is not None:
                    yield delta
        finally:
            close = getattr(response, "close", None)
            if close is not None:
                await close()

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._client.close()


class OpenAIStyleBackend:
    """Reusable backend for OpenAI-compatible providers.

    Subclasses set ``init``. ``client_factory`` replaces ``AsyncOpenAI`` (tests).
    """

    init: OpenAIStyleInit

    def __init__(self, descriptor: ProviderDescriptor, client_factory: Optional[ClientFactory] = None) -> None:
        self._descriptor = descriptor
        self._client_factory = client_factory or self._make_client

    @property
    def provider_id(self) -> str:
        return self.init.provider_id

    @property
    def base_url(self) -> str:
        if self._descriptor.base_url:
            return sanitize_base_url(self._descriptor.base_url)
        return self.init.default_base_url

    @staticmethod
    def _make_client(*, api_key: str, base_url: str) -> Any:
        return AsyncOpenAI(api_key=api_key, base_url=base_url, max_retries=0)

    def build(self, model_id: str, credential: Optional[str]) -> OpenAIStyleHandle:
        api_key = credential or self.init.placeholder_api_key
        if not api_key:
            raise MissingCredentialError(self._descriptor.id, self._descriptor.credential_key, model_id)
        client = self._client_factory(api_key=api_key, base_url=self.base_url)
        return OpenAIStyleHandle(
            self._descriptor.id,
            model_id,
            client,
            include_usage=self.init.include_usage,
            supports_top_k=self.init.supports_top_k,
        )


__all__ = ["OpenAIStyleBackend", "OpenAIStyleHandle", "ClientFactory"]
