"""Test doubles shared by the gateway test suite.

Scripted handles replay a fixed list of steps and record what happened to
them (pulls, upstream closure, handle closure) so tests can assert on
resource release without a network.
"""
from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

from llm_gateway.base.models import (
    CompletionSettings,
    ConversationTurn,
    CoreMessage,
    ProviderDescriptor,
    UpstreamDelta,
)


@dataclass(frozen=True)
class Sleep:
    """Script step: suspend for ``seconds`` before the next step."""

    seconds: float


@dataclass(frozen=True)
class Action:
    """Script step: run ``fn`` (e.g. cancel a token) and continue."""

    fn: Callable[[], Any]


def delta(text: str = "", **kwargs: Any) -> UpstreamDelta:
    return UpstreamDelta(text=text, **kwargs)


class ScriptedHandle:
    """Model handle replaying ``script``; exceptions in the script are raised."""

    def __init__(self, provider_id: str, model_id: str, script: Sequence[Any] = ()) -> None:
        self.provider_id = provider_id
        self.model_id = model_id
        self.script = list(script)
        self.stream_calls = 0
        self.pulls = 0
        self.upstream_closed = False
        self.closed = False
        self.close_calls = 0
        self.messages: Optional[Sequence[CoreMessage]] = None
        self.settings: Optional[CompletionSettings] = None

    async def stream(self, messages, settings=None):
        self.stream_calls += 1
        self.messages = messages
        self.settings = settings
        try:
            for step in self.script:
                if isinstance(step, Sleep):
                    await asyncio.sleep(step.seconds)
                    continue
                if isinstance(step, Action):
                    step.fn()
                    continue
                if isinstance(step, BaseException):
                    raise step
                self.pulls += 1
                yield step
        finally:
            self.upstream_closed = True

    async def aclose(self) -> None:
        self.close_calls += 1
        self.closed = True


class ScriptedBackend:
    """Backend building ``ScriptedHandle`` objects, or raising ``error``."""

    def __init__(self, provider_id: str, script: Sequence[Any] = (), error: Optional[Exception] = None) -> None:
        self.provider_id = provider_id
        self.script = list(script)
        self.error = error
        self.builds: List[Dict[str, Any]] = []
        self.handles: List[ScriptedHandle] = []

    def build(self, model_id: str, credential: Optional[str]) -> ScriptedHandle:
        self.builds.append({"model": model_id, "credential": credential})
        if self.error is not None:
            raise self.error
        handle = ScriptedHandle(self.provider_id, model_id, self.script)
        self.handles.append(handle)
        return handle


def make_descriptor(
    provider_id: str,
    credential_key: Optional[str] = None,
    *,
    model: str = "m1",
    models: Sequence[str] = ("m1", "m2"),
    priority: int = 0,
    aliases: Sequence[str] = (),
) -> ProviderDescriptor:
    return ProviderDescriptor(
        id=provider_id,
        credential_key=credential_key,
        default_model_id=model,
        supported_model_ids=frozenset(models),
        priority=priority,
        credential_aliases=tuple(aliases),
    )


def user_turns(*texts: str) -> List[ConversationTurn]:
    return [ConversationTurn.text("user", t) for t in texts]


class ListHandler(logging.Handler):
    """Capture log records into a list for assertions."""

    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.records: List[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)

    def events(self) -> List[Dict[str, Any]]:
        out = []
        for record in self.records:
            try:
                out.append(json.loads(record.getMessage()))
            except ValueError:
                continue
        return out
