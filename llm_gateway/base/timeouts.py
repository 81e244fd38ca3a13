"""Timeout configuration for streaming requests.

Key Components
--------------
TimeoutConfig
    Frozen dataclass with the two bounds the streaming transport enforces:
    the first upstream pull (session start) and every later pull (idle gap
    between deltas).

timeout_config_from_env(environ)
    Parse overrides from an environment snapshot. Supported variables (all
    optional, positive floats):
        GATEWAY_TIMEOUT_START_SECONDS
        GATEWAY_TIMEOUT_STREAM_SECONDS

bounded_next(iterator, seconds, provider=..., model=...)
    Await one item of an async iterator within a bound.

Failure Modes
-------------
Invalid or non-positive values fall back to the defaults; they never raise.
An expired bound raises ``ProviderError`` with ``ErrorCode.TIMEOUT`` from
``bounded_next``; the pending pull is cancelled.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import AsyncIterator, Mapping, Optional, TypeVar

from .errors import ErrorCode, ProviderError

T = TypeVar("T")

START_TIMEOUT_ENV = "GATEWAY_TIMEOUT_START_SECONDS"
STREAM_TIMEOUT_ENV = "GATEWAY_TIMEOUT_STREAM_SECONDS"


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        start_timeout_seconds: Bound on the first upstream pull, which covers
            connecting and the provider's time to first token.
        stream_timeout_seconds: Idle bound while waiting for each later delta.
    """

    start_timeout_seconds: float = 30.0
    stream_timeout_seconds: float = 60.0

    def for_pull(self, first: bool) -> float:
        return self.start_timeout_seconds if first else self.stream_timeout_seconds


def _parse_positive_float(raw: Optional[str], default: float) -> float:
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def timeout_config_from_env(environ: Mapping[str, str], base: Optional[TimeoutConfig] = None) -> TimeoutConfig:
    """Return ``base`` (or the defaults) with environment overrides applied."""
    base = base or TimeoutConfig()
    return TimeoutConfig(
        start_timeout_seconds=_parse_positive_float(environ.get(START_TIMEOUT_ENV), base.start_timeout_seconds),
        stream_timeout_seconds=_parse_positive_float(environ.get(STREAM_TIMEOUT_ENV), base.stream_timeout_seconds),
    )


async def bounded_next(
    iterator: AsyncIterator[T],
    seconds: float,
    *,
    provider: str,
    model: Optional[str] = None,
) -> T:
    """Return the next item of ``iterator`` or raise a ``timeout`` error.

    ``StopAsyncIteration`` propagates unchanged.
    """
    try:
        return await asyncio.wait_for(iterator.__anext__(), seconds)
    except asyncio.TimeoutError as exc:
        raise ProviderError(
            code=ErrorCode.TIMEOUT,
            message=f"no upstream output within {seconds:g}s",
            provider=provider,
            model=model,
            retryable=True,
            raw=exc,
        ) from exc


__all__ = [
    "TimeoutConfig",
    "timeout_config_from_env",
    "bounded_next",
    "START_TIMEOUT_ENV",
    "STREAM_TIMEOUT_ENV",
]
