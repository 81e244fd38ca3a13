"""Cooperative cancellation: nothing is emitted after cancel and resources are released."""
from __future__ import annotations

import asyncio

from llm_gateway.base.cancellation import CancellationToken
from llm_gateway.base.streaming import StreamState

from ..helpers import Action, ScriptedHandle, Sleep, delta
from .helpers import assert_well_formed, make_transport, run_transport


def _five():
    return [delta(str(i)) for i in range(5)]


def test_cancel_after_chunk_k_stops_the_stream():
    for k in range(3):
        handle = ScriptedHandle("p", "m", _five())
        token = CancellationToken()
        transport = make_transport(handle, token=token)

        async def run():
            received = []
            async for chunk in transport:
                received.append(chunk)
                if chunk.sequence_index == k:
                    token.cancel("user pressed stop")
            return received

        chunks = asyncio.run(run())
        assert_well_formed(chunks)
        assert [c.sequence_index for c in chunks] == list(range(k + 1))
        assert not any(c.is_terminal for c in chunks)
        assert transport.state is StreamState.CANCELLED
        assert handle.pulls == k + 1
        assert handle.closed and handle.upstream_closed


def test_token_cancelled_before_start_never_opens_upstream():
    handle = ScriptedHandle("p", "m", _five())
    token = CancellationToken()
    token.cancel("early")
    transport, chunks = run_transport(handle, token=token)
    assert chunks == []
    assert transport.state is StreamState.CANCELLED
    assert handle.stream_calls == 0
    assert handle.closed


def test_delta_arriving_after_cancel_is_dropped():
    token = CancellationToken()
    script = [delta("a"), Action(lambda: token.cancel("mid-pull")), delta("b"), delta("c")]
    handle = ScriptedHandle("p", "m", script)
    transport, chunks = run_transport(handle, token=token)
    assert [c.delta for c in chunks] == ["a"]
    assert transport.state is StreamState.CANCELLED
    assert handle.closed


def test_transport_cancel_method_uses_own_token():
    handle = ScriptedHandle("p", "m", _five())
    transport = make_transport(handle)

    async def run():
        out = []
        async for chunk in transport:
            out.append(chunk)
            transport.cancel()
        return out

    chunks = asyncio.run(run())
    assert len(chunks) == 1
    assert transport.cancellation_token.reason == "cancelled by caller"


def test_consumer_break_releases_resources():
    handle = ScriptedHandle("p", "m", _five())
    transport = make_transport(handle)

    async def run():
        stream = transport.__aiter__()
        try:
            async for chunk in stream:
                if chunk.sequence_index == 1:
                    break
        finally:
            await stream.aclose()

    asyncio.run(run())
    assert transport.state is StreamState.CANCELLED
    assert handle.closed and handle.upstream_closed and handle.close_calls == 1


def test_task_cancellation_while_waiting_for_upstream():
    handle = ScriptedHandle("p", "m", [delta("a"), Sleep(10), delta("b")])
    transport = make_transport(handle)

    async def run():
        task = asyncio.ensure_future(_consume(transport))
        await asyncio.sleep(0.05)
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    asyncio.run(run())
    assert transport.state is StreamState.CANCELLED
    assert transport.terminal_chunk is None
    assert handle.closed and handle.upstream_closed


async def _consume(transport):
    return [chunk async for chunk in transport]


def test_aclose_before_iteration_releases_handle():
    handle = ScriptedHandle("p", "m", _five())
    transport = make_transport(handle)
    asyncio.run(transport.aclose())
    assert transport.state is StreamState.CANCELLED
    assert handle.closed and handle.stream_calls == 0
    asyncio.run(transport.aclose())
    assert handle.close_calls == 1


def test_cancelling_one_request_leaves_siblings_running():
    root = CancellationToken()
    first, second = root.child(), root.child()
    h1 = ScriptedHandle("p", "m", _five())
    h2 = ScriptedHandle("p", "m", _five())
    t1 = make_transport(h1, token=first)
    t2 = make_transport(h2, token=second)

    async def run():
        async def drive(transport, cancel_at=None, token=None):
            out = []
            async for chunk in transport:
                out.append(chunk)
                if cancel_at is not None and chunk.sequence_index == cancel_at:
                    token.cancel("only me")
                await asyncio.sleep(0)
            return out

        return await asyncio.gather(drive(t1, 0, first), drive(t2))

    c1, c2 = asyncio.run(run())
    assert len(c1) == 1 and t1.state is StreamState.CANCELLED
    assert len(c2) == 6 and t2.state is StreamState.COMPLETED
    assert not second.cancelled and not root.cancelled
