"""Ollama backend via its OpenAI-compatible ``/v1`` endpoint.

Ollama runs locally and needs no credential; the SDK client still requires
a non-empty key, so a fixed placeholder is sent.
"""

from __future__ import annotations

from ..base.openai_style_parts import OpenAIStyleBackend, OpenAIStyleInit
from ..config.defaults import OLLAMA_DEFAULT_BASE_URL

__all__ = ["OllamaBackend"]


class OllamaBackend(OpenAIStyleBackend):
    init = OpenAIStyleInit(
        provider_id="ollama",
        default_base_url=OLLAMA_DEFAULT_BASE_URL,
        supports_top_k=True,
        placeholder_api_key="ollama",
    )
