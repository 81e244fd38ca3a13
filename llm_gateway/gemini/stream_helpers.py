"""Gemini streaming helpers for the ``google-genai`` SDK."""

from __future__ import annotations

from typing import Any, List, Optional, Sequence, Tuple

from google.genai import types

from ..base.models import CompletionSettings, CoreMessage, UpstreamDelta
from ..base.utils.messages import split_system

# Gemini names the assistant role "model".
_ROLE_MAP = {"user": "user", "assistant": "model"}

_SETTING_FIELDS = (
    ("temperature", "temperature"),
    ("max_tokens", "max_output_tokens"),
    ("top_p", "top_p"),
    ("top_k", "top_k"),
    ("frequency_penalty", "frequency_penalty"),
    ("presence_penalty", "presence_penalty"),
)


def build_contents(
    messages: Sequence[CoreMessage],
    settings: Optional[CompletionSettings],
) -> Tuple[List[types.Content], types.GenerateContentConfig]:
    """Return ``(contents, config)`` for ``generate_content_stream``."""
    system, chat = split_system(messages)
    contents = [
        types.Content(role=_ROLE_MAP.get(m.role, "user"), parts=[types.Part(text=m.content)])
        for m in chat
    ]
    config_kwargs = {}
    if system:
        config_kwargs["system_instruction"] = system
    if settings is not None:
        for ours, theirs in _SETTING_FIELDS:
            value = getattr(settings, ours)
            if value is not None:
                config_kwargs[theirs] = value
    return contents, types.GenerateContentConfig(**config_kwargs)


def translate_response_chunk(chunk: Any) -> Optional[UpstreamDelta]:  # noqa: ANN401 - SDK type
    """Map one streamed ``GenerateContentResponse``; ``None`` when empty."""
    text = ""
    finish = None
    candidates = getattr(chunk, "candidates", None) or []
    if candidates:
        candidate = candidates[0]
        content = getattr(candidate, "content", None)
        parts = getattr(content, "parts", None) or []
        text = "".join(getattr(p, "text", None) or "" for p in parts)
        reason = getattr(candidate, "finish_reason", None)
        if reason is not None:
            name = getattr(reason, "name", str(reason))
            finish = "length" if name == "MAX_TOKENS" else "stop"
    usage = getattr(chunk, "usage_metadata", None)
    prompt_tokens = getattr(usage, "prompt_token_count", None) if usage is not None else None
    completion_tokens = getattr(usage, "candidates_token_count", None) if usage is not None else None
    if not text and finish is None and prompt_tokens is None and completion_tokens is None:
        return None
    return UpstreamDelta(
        text=text,
        finish_reason=finish,  # type: ignore[arg-type]
        prompt_tokens=prompt_tokens,
        completion_tokens=completion_tokens,
    )


__all__ = ["build_contents", "translate_response_chunk"]
