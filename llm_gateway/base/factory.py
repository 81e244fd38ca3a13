"""Model Factory.

Purpose
-------
Turn ``(provider_id, model_id, credential)`` into a ready-to-stream
``ModelHandle`` wrapped with the middleware chain. Backends are imported
lazily with ``importlib`` so a missing vendor SDK only affects its own
provider, and tests can inject backends directly.

Order of checks
---------------
1. Unknown provider id        -> ``UnknownProviderError``
2. Model not supported        -> ``UnsupportedModelError``
3. Credential required, blank -> ``MissingCredentialError``

No timeouts, retries or network calls happen here; building never suspends.
"""

from __future__ import annotations

from importlib import import_module
from typing import Dict, Mapping, Optional

from .errors import (
    ErrorCode,
    MissingCredentialError,
    ProviderError,
    UnsupportedModelError,
)
from .interfaces import ModelHandle, ProviderBackend
from .logging import LogContext
from .middleware.chain import ChatMiddlewareChain
from .middleware.observed_handle import ObservedModelHandle
from .models import ProviderDescriptor
from .registry import ProviderRegistry

# Map provider ids to backend import paths and class names
BACKENDS: Dict[str, Dict[str, str]] = {
    "openai": {"module": "llm_gateway.openai.client", "class": "OpenAIBackend"},
    "anthropic": {"module": "llm_gateway.anthropic.client", "class": "AnthropicBackend"},
    "google": {"module": "llm_gateway.gemini.client", "class": "GeminiBackend"},
    "groq": {"module": "llm_gateway.groq.client", "class": "GroqBackend"},
    "openrouter": {"module": "llm_gateway.openrouter.client", "class": "OpenRouterBackend"},
    "ollama": {"module": "llm_gateway.ollama.client", "class": "OllamaBackend"},
    "mock": {"module": "llm_gateway.mock.client", "class": "MockBackend"},
    "custom": {"module": "llm_gateway.custom.client", "class": "CustomBackend"},
}


def load_backend(descriptor: ProviderDescriptor, spec: Optional[Mapping[str, str]] = None) -> ProviderBackend:
    """Import and instantiate the backend for ``descriptor``.

    Raises
    ------
    ProviderError
        ``UNSUPPORTED`` when no backend is mapped, ``INTERNAL`` when the module
        cannot be imported or the class is missing.
    """
    spec = spec or BACKENDS.get(descriptor.id)
    if spec is None:
        raise ProviderError(
            code=ErrorCode.UNSUPPORTED,
            message=f"No backend registered for provider '{descriptor.id}'",
            provider=descriptor.id,
        )
    try:
        module = import_module(spec["module"])
    except ImportError as exc:
        raise ProviderError(
            code=ErrorCode.INTERNAL,
            message=f"Failed to import backend module '{spec['module']}': {exc}",
            provider=descriptor.id,
            raw=exc,
        ) from exc
    backend_cls = getattr(module, spec["class"], None)
    if backend_cls is None:
        raise ProviderError(
            code=ErrorCode.INTERNAL,
            message=f"Backend class '{spec['class']}' not found in '{spec['module']}'",
            provider=descriptor.id,
        )
    return backend_cls(descriptor)


class ModelFactory:
    """Build request-scoped, observed model handles.

    Parameters
    ----------
    registry:
        Provider catalog.
    backends:
        Optional pre-built backends keyed by provider id; providers not listed
        are resolved lazily through ``BACKENDS`` on first use.
    middleware:
        Chain run by every handle this factory builds.
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        backends: Optional[Mapping[str, ProviderBackend]] = None,
        middleware: Optional[ChatMiddlewareChain] = None,
    ) -> None:
        self._registry = registry
        self._backends: Dict[str, ProviderBackend] = dict(backends or {})
        self._middleware = middleware or ChatMiddlewareChain()

    @property
    def middleware(self) -> ChatMiddlewareChain:
        return self._middleware

    def backend_for(self, descriptor: ProviderDescriptor) -> ProviderBackend:
        backend = self._backends.get(descriptor.id)
        if backend is None:
            backend = load_backend(descriptor)
            self._backends[descriptor.id] = backend
        return backend

    def build(
        self,
        provider_id: str,
        model_id: str,
        credential: Optional[str],
        *,
        ctx: Optional[LogContext] = None,
    ) -> ModelHandle:
        """Return an ``ObservedModelHandle`` for the requested provider/model."""
        descriptor = self._registry.get(provider_id)
        if not descriptor.supports(model_id):
            raise UnsupportedModelError(provider_id, model_id)
        if descriptor.requires_credential and not (credential or "").strip():
            raise MissingCredentialError(provider_id, descriptor.credential_key, model_id)
        raw = self.backend_for(descriptor).build(model_id, credential)
        handle_ctx = (ctx or LogContext()).bind(provider=provider_id, model=model_id)
        return ObservedModelHandle(raw, self._middleware, handle_ctx)


__all__ = ["BACKENDS", "ModelFactory", "load_backend"]
