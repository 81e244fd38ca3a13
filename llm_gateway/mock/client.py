"""Deterministic mock backend for offline development and tests.

Purpose
-------
Stream without any network traffic: the handle echoes the last user message
back in fixed-size chunks. ``MockOptions`` scripts the edge cases higher
layers need to exercise (mid-stream failure, length truncation, slow
upstream).

External dependencies
---------------------
Standard library only.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import AsyncIterator, Optional, Sequence

from ..base.errors import ErrorCode, ProviderError
from ..base.models import CompletionSettings, CoreMessage, ProviderDescriptor, UpstreamDelta
from ..base.utils.messages import last_user_text

__all__ = ["MockBackend", "MockHandle", "MockOptions"]


@dataclass(frozen=True)
class MockOptions:
    """Scripted behavior of mock handles.

    Attributes:
        chunk_size: Characters per delta.
        prefix: Text prepended to the echoed message.
        fail_after: Raise a ``ProviderError`` after this many text deltas.
        truncate: Report ``length`` as finish reason instead of ``stop``.
        delay_seconds: Sleep before every delta (simulates a slow upstream).
    """

    chunk_size: int = 8
    prefix: str = "echo: "
    fail_after: Optional[int] = None
    truncate: bool = False
    delay_seconds: float = 0.0


class MockHandle:
    def __init__(self, provider_id: str, model_id: str, options: MockOptions) -> None:
        self.provider_id = provider_id
        self.model_id = model_id
        self._options = options
        self.closed = False

    async def stream(
        self,
        messages: Sequence[CoreMessage],
        settings: Optional[CompletionSettings] = None,
    ) -> AsyncIterator[UpstreamDelta]:
        opts = self._options
        text = opts.prefix + last_user_text(messages)
        if settings is not None and settings.max_tokens is not None:
            text = text[: settings.max_tokens]
        size = max(1, opts.chunk_size)
        pieces = [text[i : i + size] for i in range(0, len(text), size)]
        for position, piece in enumerate(pieces):
            if opts.fail_after is not None and position >= opts.fail_after:
                raise ProviderError(
                    code=ErrorCode.SERVER_ERROR,
                    message="mock upstream failure",
                    provider=self.provider_id,
                    model=self.model_id,
                )
            if opts.delay_seconds:
                await asyncio.sleep(opts.delay_seconds)
            yield UpstreamDelta(text=piece, index=position)
        prompt_tokens = sum(len(m.content.split()) for m in messages)
        yield UpstreamDelta(
            finish_reason="length" if opts.truncate else "stop",
            prompt_tokens=prompt_tokens,
            completion_tokens=len(pieces),
        )

    async def aclose(self) -> None:
        self.closed = True


class MockBackend:
    """Backend producing ``MockHandle`` instances; needs no credential."""

    def __init__(self, descriptor: ProviderDescriptor, options: Optional[MockOptions] = None) -> None:
        self._descriptor = descriptor
        self._options = options or MockOptions()

    def build(self, model_id: str, credential: Optional[str]) -> MockHandle:
        return MockHandle(self._descriptor.id, model_id, self._options)
