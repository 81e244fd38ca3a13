"""Gateway facade and composition root, end to end over scripted and mock backends."""
from __future__ import annotations

import asyncio
from types import MappingProxyType

import pytest

from llm_gateway import (
    ChatGateway,
    ConversationTurn,
    FinishReason,
    NoProviderConfiguredError,
    StreamRequest,
    build_container,
    build_gateway,
    load_gateway_config,
)
from llm_gateway.base.cancellation import CancellationToken
from llm_gateway.base.errors import EmptyTurnError, ErrorCode, ProviderError, RegistryConfigError
from llm_gateway.base.metrics import InMemoryMetricsExporter
from llm_gateway.base.streaming import StreamState
from llm_gateway.base.timeouts import TimeoutConfig
from llm_gateway.config import GatewayConfig

from .helpers import Action, ScriptedBackend, Sleep, delta, make_descriptor, user_turns


def _config(environ, **kwargs):
    return GatewayConfig(
        descriptors=(
            make_descriptor("alpha", "ALPHA_API_KEY", priority=0),
            make_descriptor("beta", "BETA_API_KEY", priority=1),
        ),
        environ=MappingProxyType(dict(environ)),
        **kwargs,
    )


def _backends():
    return {
        "alpha": ScriptedBackend("alpha", [delta("al"), delta("pha")]),
        "beta": ScriptedBackend("beta", [delta("be"), delta("ta")]),
    }


async def _collect(gateway, request):
    return [chunk async for chunk in gateway.stream(request)]


def test_stream_routes_and_streams_chosen_provider():
    backends = _backends()
    gateway = build_gateway(_config({"BETA_API_KEY": "k"}), backends=backends)
    chunks = asyncio.run(_collect(gateway, StreamRequest(turns=user_turns("hi"))))
    assert "".join(c.delta for c in chunks) == "beta"
    assert chunks[-1].finish_reason is FinishReason.STOP
    assert backends["beta"].handles[0].closed


def test_open_stream_exposes_trace_and_settings_pass_through():
    gateway = build_gateway(_config({"ALPHA_API_KEY": "a", "BETA_API_KEY": "b"}), backends=_backends())
    transport = gateway.open_stream(StreamRequest(turns=user_turns("hi"), provider_id="beta", model_id="m2"))
    assert transport.trace.chosen == "beta"
    assert (transport.handle.provider_id, transport.handle.model_id) == ("beta", "m2")
    asyncio.run(transport.aclose())
    assert transport.state is StreamState.CANCELLED and transport.state.is_final


def test_routing_errors_raise_synchronously():
    gateway = build_gateway(_config({}), backends=_backends())
    with pytest.raises(NoProviderConfiguredError):
        gateway.open_stream(StreamRequest(turns=user_turns("hi")))


def test_failure_after_three_chunks_keeps_single_provider_trace():
    backends = _backends()
    boom = RuntimeError("upstream exploded")
    backends["alpha"].script = [delta("a"), delta("b"), delta("c"), boom]
    gateway = build_gateway(_config({"ALPHA_API_KEY": "a", "BETA_API_KEY": "b"}), backends=backends)
    transport = gateway.open_stream(StreamRequest(turns=user_turns("hi")))

    async def run():
        return [c async for c in transport]

    chunks = asyncio.run(run())
    assert [c.sequence_index for c in chunks] == [0, 1, 2, 3]
    assert chunks[3].finish_reason is FinishReason.ERROR
    assert transport.trace.attempted == ["alpha"]
    assert backends["beta"].builds == []


def test_stream_timeouts_come_from_config():
    backends = _backends()
    backends["alpha"].script = [Sleep(5), delta("late")]
    cfg = _config({"ALPHA_API_KEY": "a"}, timeouts=TimeoutConfig(0.05, 0.05))
    gateway = build_gateway(cfg, backends=backends)
    chunks = asyncio.run(_collect(gateway, StreamRequest(turns=user_turns("hi"))))
    assert len(chunks) == 1 and chunks[0].error.startswith("timeout: ")


def test_shutdown_cancels_in_flight_requests_only_through_gateway_tokens():
    gateway = build_gateway(_config({"ALPHA_API_KEY": "a"}), backends=_backends())
    first, second = gateway.new_token(), gateway.new_token()
    first.cancel("one")
    assert not second.cancelled
    gateway.shutdown()
    assert second.cancelled and second.reason == "gateway shutdown"


def test_providers_listing_and_first_usable():
    gateway = build_gateway(_config({"BETA_API_KEY": "b"}), backends=_backends())
    listing = gateway.providers()
    assert [p["id"] for p in listing] == ["alpha", "beta"]
    assert [p["usable"] for p in listing] == [False, True]
    assert listing[0]["models"] == ["m1", "m2"] and listing[0]["requires_credential"] is True
    assert gateway.first_usable().id == "beta"
    assert build_gateway(_config({}), backends=_backends()).first_usable() is None


def test_metrics_exported_per_request():
    exporter = InMemoryMetricsExporter()
    gateway = build_gateway(_config({"ALPHA_API_KEY": "a"}), backends=_backends(), exporter=exporter)
    asyncio.run(_collect(gateway, StreamRequest(turns=user_turns("hi"))))
    assert [p.provider for p in exporter.payloads] == ["alpha"]


def test_container_shares_singletons():
    container = build_container(_config({}), backends=_backends())
    assert container.gateway() is container.gateway()
    assert container.router() is container.router()
    assert isinstance(container.gateway(), ChatGateway)
    container.clear()
    assert container.registry() is container.registry()


def test_inconsistent_catalog_fails_at_build():
    bad = GatewayConfig(descriptors=(make_descriptor("x", model="nope", models=("m1",)),))
    with pytest.raises(RegistryConfigError):
        build_container(bad)


def test_mock_provider_end_to_end_through_real_config():
    cfg = load_gateway_config(environ={"AI_PROVIDER": "mock"})
    gateway = build_gateway(cfg)
    turns = (ConversationTurn.text("system", "ignored"), ConversationTurn.text("user", "ping"))
    chunks = asyncio.run(_collect(gateway, StreamRequest(turns=turns)))
    assert "".join(c.delta for c in chunks) == "echo: ping"
    assert chunks[-1].finish_reason is FinishReason.STOP


def test_rejected_requests_leave_no_token_behind():
    gateway = build_gateway(_config({}), backends=_backends())
    for _ in range(1000):
        with pytest.raises(NoProviderConfiguredError):
            gateway.open_stream(StreamRequest(turns=user_turns("hi")))
    empty = (ConversationTurn(role="user", parts=()),)
    with pytest.raises(EmptyTurnError):
        gateway.open_stream(StreamRequest(turns=empty))
    assert gateway.in_flight == 0


def test_request_token_released_when_stream_ends():
    gateway = build_gateway(_config({"ALPHA_API_KEY": "a"}), backends=_backends())
    transport = gateway.open_stream(StreamRequest(turns=user_turns("hi")))
    assert gateway.in_flight == 1
    asyncio.run(_collect(gateway, StreamRequest(turns=user_turns("again"))))
    assert gateway.in_flight == 1
    asyncio.run(transport.aclose())
    assert gateway.in_flight == 0


def test_caller_token_is_not_linked_to_shutdown():
    gateway = build_gateway(_config({"ALPHA_API_KEY": "a"}), backends=_backends())
    token = CancellationToken()
    transport = gateway.open_stream(StreamRequest(turns=user_turns("hi")), token)
    assert transport.cancellation_token is token
    assert gateway.in_flight == 0
    gateway.shutdown()
    assert not token.cancelled
    asyncio.run(transport.aclose())


def test_complete_collects_text_and_usage():
    cfg = load_gateway_config(environ={"AI_PROVIDER": "mock"})
    gateway = build_gateway(cfg)
    turns = (ConversationTurn.text("system", "ignored"), ConversationTurn.text("user", "ping"))
    completion = asyncio.run(gateway.complete(StreamRequest(turns=turns)))
    assert completion.text == "echo: ping"
    assert completion.finish_reason is FinishReason.STOP
    assert (completion.provider_id, completion.model_id) == ("mock", "mock-echo")
    assert completion.usage == {"prompt": 2, "completion": 2, "total": 4}
    assert completion.trace.chosen == "mock"
    assert completion.to_dict()["finish_reason"] == "stop"
    assert gateway.in_flight == 0


def test_complete_raises_the_stream_failure():
    backends = _backends()
    boom = RuntimeError("upstream exploded")
    backends["alpha"].script = [delta("a"), boom]
    gateway = build_gateway(_config({"ALPHA_API_KEY": "a"}), backends=backends)
    with pytest.raises(ProviderError) as info:
        asyncio.run(gateway.complete(StreamRequest(turns=user_turns("hi"))))
    assert info.value.raw is boom
    assert (info.value.provider, info.value.model) == ("alpha", "m1")
    assert "upstream exploded" in info.value.message
    assert backends["alpha"].handles[0].closed


def test_complete_reports_timeout_as_provider_error():
    backends = _backends()
    backends["alpha"].script = [Sleep(5), delta("late")]
    cfg = _config({"ALPHA_API_KEY": "a"}, timeouts=TimeoutConfig(0.05, 0.05))
    gateway = build_gateway(cfg, backends=backends)
    with pytest.raises(ProviderError) as info:
        asyncio.run(gateway.complete(StreamRequest(turns=user_turns("hi"))))
    assert info.value.code is ErrorCode.TIMEOUT


def test_complete_reports_cancellation():
    backends = _backends()
    gateway = build_gateway(_config({"ALPHA_API_KEY": "a"}), backends=backends)
    token = gateway.new_token()
    backends["alpha"].script = [delta("part"), Action(lambda: token.cancel("user stop")), delta("ial")]
    completion = asyncio.run(gateway.complete(StreamRequest(turns=user_turns("hi")), token))
    assert completion.finish_reason is FinishReason.CANCELLED
    assert completion.text == "part"
    assert completion.to_dict()["finish_reason"] == "cancelled"


def test_validate_model_sends_short_request():
    backends = _backends()
    gateway = build_gateway(_config({"ALPHA_API_KEY": "a"}), backends=backends)
    result = asyncio.run(gateway.validate_model("alpha", "m2"))
    assert result.valid is True
    assert result.message == "Model is properly configured"
    assert (result.provider_id, result.model_id) == ("alpha", "m2")
    handle = backends["alpha"].handles[0]
    assert [(m.role, m.content) for m in handle.messages] == [("user", "Test")]
    assert handle.settings.max_tokens == 16


def test_validate_model_reports_missing_credential():
    backends = _backends()
    gateway = build_gateway(_config({"ALPHA_API_KEY": "a"}), backends=backends)
    result = asyncio.run(gateway.validate_model("beta"))
    assert result.valid is False
    assert result.message == "Credential 'BETA_API_KEY' is not configured"
    assert result.model_id == "m1"
    assert backends["beta"].builds == []
    assert gateway.in_flight == 0


def test_validate_model_reports_unknown_provider_and_stream_failure():
    backends = _backends()
    backends["alpha"].script = [ProviderError(code=ErrorCode.AUTH, message="bad key", provider="alpha")]
    gateway = build_gateway(_config({"ALPHA_API_KEY": "a"}), backends=backends)
    unknown = asyncio.run(gateway.validate_model("ghost"))
    assert (unknown.valid, unknown.message) == (False, "Unknown provider 'ghost'")
    failed = asyncio.run(gateway.validate_model("alpha"))
    assert (failed.valid, failed.message) == (False, "bad key")
    assert failed.to_dict() == {"valid": False, "message": "bad key", "provider": "alpha", "model": None}
