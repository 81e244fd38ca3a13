"""Anthropic streaming helpers.

Pure functions mapping gateway messages to Messages API parameters and
``MessageStream`` events to ``UpstreamDelta`` values.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..base.models import CompletionSettings, CoreMessage, UpstreamDelta
from ..base.utils.messages import split_system
from ..config.defaults import ANTHROPIC_DEFAULT_MAX_TOKENS


def build_message_params(
    model: str,
    messages: Sequence[CoreMessage],
    settings: Optional[CompletionSettings],
) -> Dict[str, Any]:
    """Assemble keyword arguments for ``client.messages.stream``.

    System turns move to the ``system`` parameter; ``max_tokens`` is always
    set because the API requires it.
    """
    system, chat = split_system(messages)
    params: Dict[str, Any] = {
        "model": model,
        "messages": [{"role": m.role, "content": m.content} for m in chat],
        "max_tokens": ANTHROPIC_DEFAULT_MAX_TOKENS,
    }
    if system:
        params["system"] = system
    if settings is not None:
        if settings.max_tokens is not None:
            params["max_tokens"] = settings.max_tokens
        for name in ("temperature", "top_p", "top_k"):
            value = getattr(settings, name)
            if value is not None:
                params[name] = value
    return params


def translate_stream_event(event: Any) -> Optional[UpstreamDelta]:  # noqa: ANN401 - SDK type
    """Map one ``MessageStream`` event; ``None`` for events with no payload.

    Only the synthesized ``text`` events carry text, so raw
    ``content_block_delta`` events are ignored to avoid duplicates.
    """
    kind = getattr(event, "type", None)
    if kind == "text":
        text = getattr(event, "text", "") or ""
        return UpstreamDelta(text=text) if text else None
    if kind == "message_start":
        usage = getattr(getattr(event, "message", None), "usage", None)
        tokens = getattr(usage, "input_tokens", None)
        return UpstreamDelta(prompt_tokens=tokens) if tokens is not None else None
    if kind == "message_delta":
        stop_reason = getattr(getattr(event, "delta", None), "stop_reason", None)
        usage = getattr(event, "usage", None)
        return UpstreamDelta(
            finish_reason="length" if stop_reason == "max_tokens" else ("stop" if stop_reason else None),
            completion_tokens=getattr(usage, "output_tokens", None),
        )
    return None


__all__ = ["build_message_params", "translate_stream_event"]
