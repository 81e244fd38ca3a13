"""Chunk sequence contract: ordering, terminal chunk and empty deltas."""
from __future__ import annotations

import asyncio

import pytest

from llm_gateway.base.models import CompletionSettings, FinishReason
from llm_gateway.base.streaming import StreamState

from ..helpers import ScriptedHandle, delta
from .helpers import MESSAGES, assert_well_formed, make_transport, run_transport


def test_completed_stream_ends_with_single_stop_chunk():
    handle = ScriptedHandle("p", "m", [delta("Hel"), delta("lo"), delta("", finish_reason="stop")])
    transport, chunks = run_transport(handle)
    assert_well_formed(chunks)
    assert [c.delta for c in chunks] == ["Hel", "lo", ""]
    assert chunks[-1].finish_reason is FinishReason.STOP
    assert chunks[-1].error is None
    assert transport.state is StreamState.COMPLETED
    assert transport.terminal_chunk is chunks[-1]


def test_empty_upstream_still_gets_terminal_chunk():
    transport, chunks = run_transport(ScriptedHandle("p", "m", []))
    assert len(chunks) == 1
    assert chunks[0].sequence_index == 0 and chunks[0].finish_reason is FinishReason.STOP


def test_empty_deltas_are_dropped_without_gaps():
    script = [delta(""), delta("a", prompt_tokens=3), delta(""), delta("b"), delta("", completion_tokens=2)]
    _, chunks = run_transport(ScriptedHandle("p", "m", script))
    assert_well_formed(chunks)
    assert [c.delta for c in chunks] == ["a", "b", ""]


def test_length_truncation_reported_on_terminal_chunk():
    script = [delta("abc"), delta("", finish_reason="length")]
    _, chunks = run_transport(ScriptedHandle("p", "m", script))
    assert chunks[-1].finish_reason is FinishReason.LENGTH


def test_truncation_flag_on_text_delta_counts():
    _, chunks = run_transport(ScriptedHandle("p", "m", [delta("abc", finish_reason="length")]))
    assert [c.delta for c in chunks] == ["abc", ""]
    assert chunks[-1].finish_reason is FinishReason.LENGTH


def test_messages_and_settings_reach_the_handle():
    handle = ScriptedHandle("p", "m", [delta("x")])
    settings = CompletionSettings(temperature=0.1)
    run_transport(handle, settings=settings)
    assert tuple(handle.messages) == MESSAGES
    assert handle.settings is settings


def test_resources_released_after_completion():
    handle = ScriptedHandle("p", "m", [delta("x")])
    run_transport(handle)
    assert handle.upstream_closed and handle.closed
    assert handle.close_calls == 1


def test_transport_is_single_use():
    transport = make_transport(ScriptedHandle("p", "m", [delta("x")]))
    transport.__aiter__()
    with pytest.raises(RuntimeError):
        transport.__aiter__()


def test_no_prefetch_beyond_consumer_demand():
    handle = ScriptedHandle("p", "m", [delta("a"), delta("b"), delta("c")])
    transport = make_transport(handle)

    async def run():
        stream = transport.__aiter__()
        first = await stream.__anext__()
        pulls_after_first = handle.pulls
        await stream.aclose()
        return first, pulls_after_first

    first, pulls = asyncio.run(run())
    assert first.delta == "a"
    assert pulls == 1
    assert handle.closed


def test_deliver_pushes_every_chunk_in_order():
    handle = ScriptedHandle("p", "m", [delta("a"), delta("b")])
    transport = make_transport(handle)
    received = []

    async def sink(chunk):
        received.append(chunk)

    state = asyncio.run(transport.deliver(sink))
    assert state is StreamState.COMPLETED
    assert [c.delta for c in received] == ["a", "b", ""]


def test_deliver_sink_failure_cancels_and_releases():
    handle = ScriptedHandle("p", "m", [delta("a"), delta("b")])
    transport = make_transport(handle)

    async def sink(chunk):
        raise ValueError("consumer broke")

    with pytest.raises(ValueError):
        asyncio.run(transport.deliver(sink))
    assert transport.state is StreamState.CANCELLED
    assert transport.terminal_chunk is None
    assert handle.closed and handle.upstream_closed
