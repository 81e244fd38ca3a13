"""Google Gemini backend built on the ``google-genai`` SDK.

Streams with ``client.aio.models.generate_content_stream``. Assistant turns
are sent with the ``model`` role and system turns as ``system_instruction``.
"""

from __future__ import annotations

from typing import Any, AsyncIterator, Callable, Optional, Sequence

from google import genai

from ..base.errors import MissingCredentialError
from ..base.models import CompletionSettings, CoreMessage, ProviderDescriptor, UpstreamDelta
from .stream_helpers import build_contents, translate_response_chunk

__all__ = ["GeminiBackend", "GeminiHandle"]


class GeminiHandle:
    """Request-scoped handle owning one ``genai.Client``."""

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
        contents, config = build_contents(messages, settings)
        response = await self._client.aio.models.generate_content_stream(
            model=self.model_id,
            contents=contents,
            config=config,
        )
        try:
            async for chunk in response:
                delta = translate_response_chunk(chunk)
                if delta is not None:
                    yield delta
        finally:
            aclose = getattr(response, "aclose", None)
            if aclose is not None:
                await aclose()

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        aclose = getattr(self._client.aio, "aclose", None)
        if aclose is not None:
            await aclose()


class GeminiBackend:
    """Build ``GeminiHandle`` instances; ``client_factory`` replaces the SDK client in tests."""

    def __init__(self, descriptor: ProviderDescriptor, client_factory: Optional[Callable[..., Any]] = None) -> None:
        self._descriptor = descriptor
        self._client_factory = client_factory or self._make_client

    @staticmethod
    def _make_client(*, api_key: str) -> Any:
        return genai.Client(api_key=api_key)

    def build(self, model_id: str, credential: Optional[str]) -> GeminiHandle:
        if not credential:
            raise MissingCredentialError(self._descriptor.id, self._descriptor.credential_key, model_id)
        return GeminiHandle(self._descriptor.id, model_id, self._client_factory(api_key=credential))
