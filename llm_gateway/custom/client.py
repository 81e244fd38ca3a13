"""Backend for any user-supplied OpenAI-compatible endpoint.

The endpoint comes from the descriptor's ``base_url`` (``CUSTOM_BASE_URL`` or
the config file); there is no default. Pasted endpoint paths such as
``/chat/completions`` are stripped like for every OpenAI-style backend.
"""

from __future__ import annotations

from typing import Optional

from ..base.errors import ErrorCode, ProviderError
from ..base.openai_style_parts import OpenAIStyleBackend, OpenAIStyleHandle, OpenAIStyleInit

__all__ = ["CustomBackend"]


class CustomBackend(OpenAIStyleBackend):
    init = OpenAIStyleInit(provider_id="custom", default_base_url="")

    def build(self, model_id: str, credential: Optional[str]) -> OpenAIStyleHandle:
        if not self._descriptor.base_url:
            raise ProviderError(
                code=ErrorCode.VALIDATION,
                message="No base URL configured for the custom provider",
                provider=self._descriptor.id,
                model=model_id,
            )
        return super().build(model_id, credential)
