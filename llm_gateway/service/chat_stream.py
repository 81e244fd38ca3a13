"""
NDJSON encoding of a gateway stream.

Purpose
-------
Turn a ``StreamingTransport`` into the byte lines written by
``POST /api/chat/stream``. Each line is one ``StreamChunk``:

    {"sequence_index": 0, "delta": "Hel", "finish_reason": null, "error": null}

Termination semantics
---------------------
- Completed and failed streams end with exactly one line whose
  ``finish_reason`` is set; failures carry the sanitized error there.
- If the client disconnects, the request's token is cancelled, no further
  line is written and the upstream is released.
"""
from __future__ import annotations

import json
from typing import AsyncIterator, Awaitable, Callable, Optional

from ..base.streaming import StreamingTransport

NDJSON_MEDIA_TYPE = "application/x-ndjson"

DisconnectCheck = Callable[[], Awaitable[bool]]


def encode_line(payload: dict) -> bytes:
    return (json.dumps(payload) + "\n").encode("utf-8")


async def iter_ndjson(
    transport: StreamingTransport,
    is_disconnected: Optional[DisconnectCheck] = None,
) -> AsyncIterator[bytes]:
    """Yield one NDJSON line per chunk, polling ``is_disconnected`` before each write."""
    stream = transport.__aiter__()
    try:
        async for chunk in stream:
            if is_disconnected is not None and await is_disconnected():
                transport.cancel("client disconnected")
                break
            yield encode_line(chunk.to_dict())
    finally:
        await transport.aclose()


__all__ = ["NDJSON_MEDIA_TYPE", "DisconnectCheck", "encode_line", "iter_ndjson"]
