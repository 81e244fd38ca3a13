"""Chat gateway facade.

The request boundary of the package: validates and routes a conversation,
then hands back a ``StreamingTransport`` bound to the chosen provider.
Routing and validation errors are raised synchronously from
``open_stream``; everything after that surfaces as stream chunks.

``complete`` drains a stream into one ``Completion`` and ``validate_model``
checks that a provider/model pair builds and answers a short request.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Dict, List, Optional, Tuple

from .base.cancellation import CancellationToken
from .base.errors import ProviderError, classify_exception, sanitize_error_message
from .base.interfaces import ModelHandle
from .base.logging import LogContext, get_logger, log_event
from .base.models import (
    CompletionSettings,
    ConversationTurn,
    FinishReason,
    ProviderDescriptor,
    RoutingTrace,
    StreamChunk,
)
from .base.registry import ProviderRegistry
from .base.repositories.keys import CredentialResolver
from .base.routing.router import FallbackRouter
from .base.streaming.transport import StreamingTransport
from .base.timeouts import TimeoutConfig


@dataclass(frozen=True)
class StreamRequest:
    """One chat request as seen by the gateway.

    Attributes:
        turns: Conversation, oldest first.
        provider_id: Pin a provider (disables fallback).
        model_id: Pin a model; defaults to the provider's default model.
        settings: Completion settings passed to the backend.
        request_id: Correlation id for logs; generated when absent.
    """

    turns: Tuple[ConversationTurn, ...]
    provider_id: Optional[str] = None
    model_id: Optional[str] = None
    settings: Optional[CompletionSettings] = None
    request_id: Optional[str] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.turns, tuple):
            object.__setattr__(self, "turns", tuple(self.turns))


VALIDATION_PROMPT = "Test"
VALIDATION_MAX_TOKENS = 16


@dataclass(frozen=True)
class Completion:
    """Result of a drained stream.

    ``finish_reason`` is ``CANCELLED`` when the request was cancelled before
    the stream ended; ``text`` then holds what arrived until then.
    """

    text: str
    finish_reason: FinishReason
    provider_id: str
    model_id: str
    usage: Optional[Dict[str, Optional[int]]] = None
    trace: Optional[RoutingTrace] = field(default=None, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "finish_reason": self.finish_reason.value,
            "provider": self.provider_id,
            "model": self.model_id,
            "usage": self.usage,
        }


@dataclass(frozen=True)
class ModelValidation:
    valid: bool
    message: str
    provider_id: str
    model_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "message": self.message,
            "provider": self.provider_id,
            "model": self.model_id,
        }


def _stream_failure(transport: StreamingTransport) -> ProviderError:
    """Return the ``ProviderError`` describing a failed transport."""
    handle: ModelHandle = transport.handle
    exc = transport.failure or RuntimeError(transport.error or "stream failed")
    if isinstance(exc, ProviderError):
        return exc
    return ProviderError(
        code=classify_exception(exc),
        message=sanitize_error_message(str(exc) or exc.__class__.__name__),
        provider=handle.provider_id,
        model=handle.model_id,
        raw=exc,
    )


class ChatGateway:
    """Route conversations and stream the chosen provider's output.

    Each request gets its own cancellation token, a child of the gateway's
    shutdown token: ``shutdown()`` cancels every in-flight stream, while
    cancelling one request's token leaves the others untouched.
    """

    def __init__(
        self,
        router: FallbackRouter,
        registry: ProviderRegistry,
        resolver: CredentialResolver,
        timeouts: Optional[TimeoutConfig] = None,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._router = router
        self._registry = registry
        self._resolver = resolver
        self._timeouts = timeouts or TimeoutConfig()
        self._shutdown = CancellationToken()
        self._logger = logger or get_logger("llm_gateway.gateway")

    @property
    def timeouts(self) -> TimeoutConfig:
        return self._timeouts

    @property
    def in_flight(self) -> int:
        """Gateway-issued request tokens still linked to the shutdown token."""
        return self._shutdown.child_count

    def new_token(self) -> CancellationToken:
        """Return a fresh request token linked to the shutdown token."""
        return self._shutdown.child()

    def open_stream(
        self,
        request: StreamRequest,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> StreamingTransport:
        """Route ``request`` and return an unstarted transport.

        Raises the routing/validation errors of ``FallbackRouter.route``. The
        request token is issued only once routing succeeded, so rejected
        requests leave nothing linked to the shutdown token.
        """
        request_id = request.request_id or uuid.uuid4().hex
        ctx = LogContext(request_id=request_id)
        log_event(
            self._logger,
            "gateway.request",
            ctx.bind(provider=request.provider_id, model=request.model_id),
            turns=len(request.turns),
        )
        result = self._router.route(
            request.turns,
            request.provider_id,
            request.model_id,
            ctx=ctx,
        )
        token = cancellation_token or self.new_token()
        return StreamingTransport(
            result.handle,
            result.messages,
            request.settings,
            token,
            self._timeouts,
            result.trace,
            ctx=ctx,
        )

    async def stream(
        self,
        request: StreamRequest,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> AsyncIterator[StreamChunk]:
        """Convenience generator over ``open_stream``; closes the transport on exit."""
        transport = self.open_stream(request, cancellation_token)
        try:
            async for chunk in transport:
                yield chunk
        finally:
            await transport.aclose()

    async def complete(
        self,
        request: StreamRequest,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> Completion:
        """Drain one stream into a ``Completion``.

        Raises:
            ProviderError: routing errors as in ``open_stream``; when the
                stream fails, the error that failed it (other exceptions are
                classified and wrapped).
        """
        transport = self.open_stream(request, cancellation_token)
        parts: List[str] = []
        try:
            async for chunk in transport:
                parts.append(chunk.delta)
        finally:
            await transport.aclose()
        terminal = transport.terminal_chunk
        if terminal is not None and terminal.finish_reason is FinishReason.ERROR:
            raise _stream_failure(transport)
        return Completion(
            text="".join(parts),
            finish_reason=terminal.finish_reason if terminal is not None else FinishReason.CANCELLED,
            provider_id=transport.handle.provider_id,
            model_id=transport.handle.model_id,
            usage=transport.usage,
            trace=transport.trace,
        )

    async def validate_model(self, provider_id: str, model_id: Optional[str] = None) -> ModelValidation:
        """Check that ``provider_id``/``model_id`` builds and answers a short request.

        Never raises for provider problems; they come back as ``valid=False``
        with the sanitized error message.
        """
        request = StreamRequest(
            turns=(ConversationTurn.text("user", VALIDATION_PROMPT),),
            provider_id=provider_id,
            model_id=model_id,
            settings=CompletionSettings(max_tokens=VALIDATION_MAX_TOKENS),
        )
        try:
            completion = await self.complete(request)
        except ProviderError as exc:
            log_event(
                self._logger,
                "gateway.validate",
                LogContext(provider=provider_id, model=model_id),
                level=logging.WARNING,
                valid=False,
                error_code=exc.code.value,
            )
            return ModelValidation(False, sanitize_error_message(exc.message), provider_id, exc.model or model_id)
        if completion.finish_reason is FinishReason.CANCELLED:
            return ModelValidation(False, "Validation request was cancelled", provider_id, completion.model_id)
        log_event(
            self._logger,
            "gateway.validate",
            LogContext(provider=provider_id, model=completion.model_id),
            valid=True,
        )
        return ModelValidation(True, "Model is properly configured", provider_id, completion.model_id)

    def providers(self) -> List[Dict[str, Any]]:
        """Catalog listing with usability flags, by priority."""
        return [
            {
                "id": d.id,
                "default_model": d.default_model_id,
                "models": sorted(d.supported_model_ids),
                "priority": d.priority,
                "requires_credential": d.requires_credential,
                "usable": self._resolver.is_usable(d),
            }
            for d in self._registry.list()
        ]

    def first_usable(self) -> Optional[ProviderDescriptor]:
        for descriptor in self._registry.list():
            if self._resolver.is_usable(descriptor):
                return descriptor
        return None

    def shutdown(self, reason: str = "gateway shutdown") -> None:
        """Cancel every in-flight stream opened with a gateway-issued token."""
        self._shutdown.cancel(reason)


__all__ = ["ChatGateway", "Completion", "ModelValidation", "StreamRequest"]
