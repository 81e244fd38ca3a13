"""Fixtures for streaming transport tests."""
from __future__ import annotations

import pytest

from llm_gateway.base.timeouts import TimeoutConfig


@pytest.fixture()
def fast_timeouts() -> TimeoutConfig:
    """Bounds short enough that a stalled upstream fails within the test."""
    return TimeoutConfig(start_timeout_seconds=0.05, stream_timeout_seconds=0.05)
