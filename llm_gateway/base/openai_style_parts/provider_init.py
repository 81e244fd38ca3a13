"""Initialization dataclass for OpenAI-compatible backends.

Pure data container; no I/O occurs here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class OpenAIStyleInit:
    """Per-provider settings of an ``OpenAIStyleBackend``.

    Attributes:
        provider_id: Catalog id (``openai``, ``groq`` ...).
        default_base_url: Endpoint used when the descriptor has no override.
        include_usage: Request a trailing usage chunk (``stream_options``).
        supports_top_k: Forward ``top_k`` in the request body.
        placeholder_api_key: Key sent by keyless backends, whose SDK client
            still requires a non-empty value.
    """

    provider_id: str
    default_base_url: str
    include_usage: bool = False
    supports_top_k: bool = False
    placeholder_api_key: Optional[str] = None


__all__ = ["OpenAIStyleInit"]
