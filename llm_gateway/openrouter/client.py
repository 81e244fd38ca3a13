"""OpenRouter backend.

OpenRouter proxies many vendors behind the OpenAI protocol and accepts the
extra ``top_k`` sampling parameter.
"""

from __future__ import annotations

from ..base.openai_style_parts import OpenAIStyleBackend, OpenAIStyleInit
from ..config.defaults import OPENROUTER_DEFAULT_BASE_URL

__all__ = ["OpenRouterBackend"]


class OpenRouterBackend(OpenAIStyleBackend):
    init = OpenAIStyleInit(
        provider_id="openrouter",
        default_base_url=OPENROUTER_DEFAULT_BASE_URL,
        include_usage=True,
        supports_top_k=True,
    )
