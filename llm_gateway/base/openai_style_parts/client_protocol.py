"""Protocol definition for async OpenAI-compatible chat completions clients.

Describes the minimal client surface ``OpenAIStyleHandle`` relies on, so the
handle can be exercised with an in-memory fake in tests.
"""

from __future__ import annotations

from typing import Any, Protocol


class ChatCompletionsClient(Protocol):
    """Async client exposing ``chat.completions.create(**params)`` and ``close()``.

    With ``stream=True`` the awaited ``create`` call returns an async iterator
    of chunks with ``choices[0].delta.content`` and a ``close()`` coroutine.
    """

    class _ChatNS(Protocol):  # pragma: no cover - structural hint only
        class _CompletionsNS(Protocol):
            async def create(self, **params: Any) -> Any:  # noqa: D401 - SDK parity
                """Start a chat completion request."""
                ...

        completions: _CompletionsNS

    chat: _ChatNS

    async def close(self) -> None:  # pragma: no cover - structural hint only
        ...


__all__ = ["ChatCompletionsClient"]
