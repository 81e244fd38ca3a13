"""Helpers shared by OpenAI-compatible backends.

All functions are pure: they build request parameters, translate SDK stream
chunks into ``UpstreamDelta`` values and normalize user-supplied base URLs.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from ..models import CompletionSettings, CoreMessage, UpstreamDelta

# Longest suffix first so "/chat/completions" is not reduced to "/chat".
_ENDPOINT_SUFFIXES = (
    "/chat/completions",
    "/completions",
)

_PASSTHROUGH_SETTINGS = ("temperature", "max_tokens", "top_p", "frequency_penalty", "presence_penalty")


def sanitize_base_url(url: str) -> str:
    """Strip a pasted endpoint path and trailing slash from a base URL.

    ``https://host/v1/chat/completions`` becomes ``https://host/v1``; the
    SDK appends the endpoint path itself.
    """
    cleaned = url.strip().rstrip("/")
    for suffix in _ENDPOINT_SUFFIXES:
        if cleaned.endswith(suffix):
            cleaned = cleaned[: -len(suffix)]
            break
    return cleaned.rstrip("/")


def to_openai_messages(messages: Sequence[CoreMessage]) -> List[Dict[str, str]]:
    return [{"role": m.role, "content": m.content} for m in messages]


def build_stream_params(
    model: str,
    messages: Sequence[CoreMessage],
    settings: Optional[CompletionSettings],
    *,
    include_usage: bool = False,
    supports_top_k: bool = False,
) -> Dict[str, Any]:
    """Assemble keyword arguments for ``chat.completions.create`` with streaming."""
    params: Dict[str, Any] = {
        "model": model,
        "messages": to_openai_messages(messages),
        "stream": True,
    }
    if include_usage:
        params["stream_options"] = {"include_usage": True}
    if settings is not None:
        for name in _PASSTHROUGH_SETTINGS:
            value = getattr(settings, name)
            if value is not None:
                params[name] = value
        if supports_top_k and settings.top_k is not None:
            params["extra_body"] = {"top_k": settings.top_k}
    return params


def _finish(raw: Optional[str]) -> Optional[str]:
    if raw is None:
        return None
    return "length" if raw == "length" else "stop"


def translate_chunk(chunk: Any) -> Optional[UpstreamDelta]:
    """Translate one SDK stream chunk; ``None`` when it carries nothing."""
    text = ""
    finish = None
    index = None
    choices = getattr(chunk, "choices", None) or []
    if choices:
        choice = choices[0]
        index = getattr(choice, "index", None)
        delta = getattr(choice, "delta", None)
        text = (getattr(delta, "content", None) or "") if delta is not None else ""
        finish = _finish(getattr(choice, "finish_reason", None))
    usage = getattr(chunk, "usage", None)
    prompt_tokens = getattr(usage, "prompt_tokens", None) if usage is not None else None
    completion_tokens = getattr(usage, "completion_tokens", None) if usage is not None else None
    if not text and finish is None and usage is None:
        return None
    return UpstreamDelta(
        text=text,
        finish_reason=finish,  # type: ignore[arg-type]
        prompt_tokens=prompt_tokens,
        completion_tokens=completion_tokens,
        index=index,
    )


__all__ = [
    "sanitize_base_url",
    "to_openai_messages",
    "build_stream_params",
    "translate_chunk",
]
