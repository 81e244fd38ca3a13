"""Groq backend (OpenAI-compatible endpoint)."""

from __future__ import annotations

from ..base.openai_style_parts import OpenAIStyleBackend, OpenAIStyleInit
from ..config.defaults import GROQ_DEFAULT_BASE_URL

__all__ = ["GroqBackend"]


class GroqBackend(OpenAIStyleBackend):
    init = OpenAIStyleInit(
        provider_id="groq",
        default_base_url=GROQ_DEFAULT_BASE_URL,
    )
