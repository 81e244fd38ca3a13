"""Fallback Router.

Chooses the provider for one request and builds its model handle. Fallback
happens only here, at handle-construction time: once a handle is returned
the request is committed to that provider, and a later streaming failure
never moves to another one.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from ..errors import (
    AllProvidersFailedError,
    NoProviderConfiguredError,
    ProviderError,
    describe_exception,
)
from ..factory import ModelFactory
from ..logging import LogContext, get_logger, log_event, normalized_log_event
from ..models import ConversationTurn, ProviderDescriptor, RouteResult, RoutingTrace
from ..registry import ProviderRegistry
from ..repositories.keys import CredentialResolver
from ..tracing import start_span
from ..utils.messages import to_core


class FallbackRouter:
    """Route a conversation to the first provider that yields a handle.

    Example usage:
        router = FallbackRouter(registry, CredentialResolver(env), factory)
        result = router.route(turns)
        result.handle, result.trace
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        resolver: CredentialResolver,
        factory: ModelFactory,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._registry = registry
        self._resolver = resolver
        self._factory = factory
        self._logger = logger or get_logger("llm_gateway.router")

    def route(
        self,
        turns: Sequence[ConversationTurn],
        explicit_provider: Optional[str] = None,
        explicit_model: Optional[str] = None,
        *,
        ctx: Optional[LogContext] = None,
    ) -> RouteResult:
        """Normalize ``turns`` and return a handle plus the routing trace.

        Raises
        ------
        EmptyTurnError, UnsupportedPartKindError
            Before any provider is considered.
        NoProviderConfiguredError
            No provider is usable; nothing was built.
        AllProvidersFailedError
            Every usable candidate failed to build.
        ProviderError
            With an explicit provider, its own build error (``trace`` attached).
        """
        ctx = ctx or LogContext()
        messages = to_core(turns)
        trace = RoutingTrace()
        with start_span("gateway.route") as span:
            if explicit_provider is not None:
                handle = self._route_explicit(explicit_provider, explicit_model, trace, ctx)
            else:
                handle = self._route_fallback(explicit_model, trace, ctx)
            span.set_attribute("gateway.provider", handle.provider_id)
            span.set_attribute("gateway.attempts", len(trace.attempted))
        self._log_decision(ctx, trace, handle.model_id, pinned=explicit_provider is not None)
        return RouteResult(handle=handle, trace=trace, messages=messages)

    def _route_explicit(
        self,
        provider_id: str,
        model_id: Optional[str],
        trace: RoutingTrace,
        ctx: LogContext,
    ):
        trace.record_attempt(provider_id)
        try:
            descriptor = self._registry.get(provider_id)
            handle = self._factory.build(
                provider_id,
                model_id or descriptor.default_model_id,
                self._resolver.resolve(descriptor),
                ctx=ctx,
            )
        except ProviderError as exc:
            trace.record_failure(provider_id, describe_exception(exc))
            exc.trace = trace  # type: ignore[attr-defined]
            self._log_decision(ctx, trace, model_id, pinned=True, error_code=exc.code.value)
            raise
        trace.record_choice(provider_id)
        return handle

    def _candidates(self, trace: RoutingTrace, ctx: LogContext) -> List[ProviderDescriptor]:
        usable: List[ProviderDescriptor] = []
        for descriptor in self._registry.list():
            if self._resolver.is_usable(descriptor):
                usable.append(descriptor)
                continue
            names = " or ".join(n for n in (descriptor.credential_key, *descriptor.credential_aliases) if n)
            trace.record_skip(descriptor.id, f"auth: skipped, credential {names} is not configured")
            log_event(
                self._logger,
                "router.candidate.skip",
                ctx.bind(provider=descriptor.id),
                level=logging.DEBUG,
                reason="missing_credential",
            )
        return usable

    def _route_fallback(self, model_id: Optional[str], trace: RoutingTrace, ctx: LogContext):
        candidates = self._candidates(trace, ctx)
        if not candidates:
            self._log_decision(ctx, trace, model_id, pinned=False, error_code="unavailable")
            raise NoProviderConfiguredError(trace)

        for attempt, descriptor in enumerate(candidates, start=1):
            trace.record_attempt(descriptor.id)
            target_model = model_id or descriptor.default_model_id
            try:
                handle = self._factory.build(
                    descriptor.id,
                    target_model,
                    self._resolver.resolve(descriptor),
                    ctx=ctx,
                )
            except Exception as exc:  # noqa: BLE001 - any build failure advances to the next candidate
                reason = describe_exception(exc)
                trace.record_failure(descriptor.id, reason)
                normalized_log_event(
                    self._logger,
                    "router.build.failed",
                    ctx.bind(provider=descriptor.id, model=target_model),
                    phase="route",
                    attempt=attempt,
                    error_code=reason.split(":", 1)[0],
                    emitted=False,
                    level=logging.WARNING,
                    error=reason,
                )
                continue
            trace.record_choice(descriptor.id)
            return handle

        self._log_decision(ctx, trace, model_id, pinned=False, error_code="unavailable")
        raise AllProvidersFailedError(trace)

    def _log_decision(
        self,
        ctx: LogContext,
        trace: RoutingTrace,
        model_id: Optional[str],
        *,
        pinned: bool,
        error_code: Optional[str] = None,
    ) -> None:
        normalized_log_event(
            self._logger,
            "router.route",
            ctx.bind(provider=trace.chosen, model=model_id),
            phase="route",
            attempt=len(trace.attempted) or None,
            error_code=error_code,
            emitted=False,
            level=logging.WARNING if error_code else logging.INFO,
            pinned=pinned,
            trace=trace.to_dict(),
        )


__all__ = ["FallbackRouter"]
