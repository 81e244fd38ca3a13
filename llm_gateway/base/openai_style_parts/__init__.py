"""OpenAI-compatible backend parts: handle, backend, init bundle and helpers."""

from .base import OpenAIStyleBackend, OpenAIStyleHandle
from .provider_init import OpenAIStyleInit
from .style_helpers import build_stream_params, sanitize_base_url, translate_chunk

__all__ = [
    "OpenAIStyleBackend",
    "OpenAIStyleHandle",
    "OpenAIStyleInit",
    "build_stream_params",
    "sanitize_base_url",
    "translate_chunk",
]
