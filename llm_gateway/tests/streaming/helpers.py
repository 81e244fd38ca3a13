"""Helpers for driving a ``StreamingTransport`` to completion in tests."""
from __future__ import annotations

import asyncio
from typing import List, Optional, Sequence, Tuple

from llm_gateway.base.cancellation import CancellationToken
from llm_gateway.base.models import CompletionSettings, CoreMessage, StreamChunk
from llm_gateway.base.streaming import StreamingTransport
from llm_gateway.base.timeouts import TimeoutConfig

MESSAGES: Tuple[CoreMessage, ...] = (CoreMessage("user", "hello"),)


def make_transport(
    handle,
    *,
    token: Optional[CancellationToken] = None,
    timeouts: Optional[TimeoutConfig] = None,
    settings: Optional[CompletionSettings] = None,
    messages: Sequence[CoreMessage] = MESSAGES,
) -> StreamingTransport:
    return StreamingTransport(handle, messages, settings, token, timeouts)


async def collect(transport: StreamingTransport) -> List[StreamChunk]:
    return [chunk async for chunk in transport]


def run_transport(handle, **kwargs) -> Tuple[StreamingTransport, List[StreamChunk]]:
    transport = make_transport(handle, **kwargs)
    return transport, asyncio.run(collect(transport))


def assert_well_formed(chunks: Sequence[StreamChunk]) -> None:
    """Gap-free indices from 0 and at most one terminal chunk, in last position."""
    assert [c.sequence_index for c in chunks] == list(range(len(chunks)))
    terminals = [c for c in chunks if c.is_terminal]
    assert len(terminals) <= 1
    if terminals:
        assert chunks[-1] is terminals[0]
