"""
Concrete gateway error types raised by the registry, normalizer, factory and
router.

Each type fixes its :class:`ErrorCode` so callers can branch on the class or
on ``code`` interchangeably. Routing errors carry the request's
``RoutingTrace`` in ``trace`` for diagnosis.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from .error_code import ErrorCode
from .provider_error import ProviderError

if TYPE_CHECKING:
    from ..models_parts.routing_trace import RoutingTrace


class RegistryConfigError(ValueError):
    """Raised at start-up when the provider catalog is malformed.

    Duplicate ids, empty supported-model sets and default models outside the
    supported set are fatal configuration errors, not per-request failures.
    """


class UnknownProviderError(ProviderError):
    """Provider id is not present in the registry."""

    def __init__(self, provider_id: str) -> None:
        super().__init__(
            code=ErrorCode.NOT_FOUND,
            message=f"Unknown provider '{provider_id}'",
            provider=provider_id,
        )
        self.trace: Optional["RoutingTrace"] = None


class UnsupportedModelError(ProviderError):
    """Requested model is not in the provider's supported set."""

    def __init__(self, provider_id: str, model_id: str) -> None:
        super().__init__(
            code=ErrorCode.UNSUPPORTED,
            message=f"Model '{model_id}' is not supported by provider '{provider_id}'",
            provider=provider_id,
            model=model_id,
        )
        self.trace: Optional["RoutingTrace"] = None


class MissingCredentialError(ProviderError):
    """Provider requires a credential that is not configured."""

    def __init__(self, provider_id: str, credential_key: Optional[str], model_id: Optional[str] = None) -> None:
        super().__init__(
            code=ErrorCode.AUTH,
            message=f"Credential '{credential_key}' is not configured",
            provider=provider_id,
            model=model_id,
        )
        self.credential_key = credential_key
        self.trace: Optional["RoutingTrace"] = None


class NoProviderConfiguredError(ProviderError):
    """No provider in the registry has a complete local configuration."""

    def __init__(self, trace: "RoutingTrace") -> None:
        super().__init__(
            code=ErrorCode.UNAVAILABLE,
            message="No AI provider configured; set the API key of at least one provider",
            provider="router",
        )
        self.trace = trace


class AllProvidersFailedError(ProviderError):
    """Every usable candidate failed to build a model handle."""

    def __init__(self, trace: "RoutingTrace") -> None:
        attempted = ", ".join(trace.attempted) or "-"
        super().__init__(
            code=ErrorCode.UNAVAILABLE,
            message=f"All providers failed to build a model handle (attempted: {attempted})",
            provider="router",
        )
        self.trace = trace


class EmptyTurnError(ProviderError):
    """A conversation turn has no content parts."""

    def __init__(self, turn_index: int) -> None:
        super().__init__(
            code=ErrorCode.VALIDATION,
            message=f"Turn {turn_index} has no content parts",
            provider="normalizer",
        )
        self.turn_index = turn_index


class UnsupportedPartKindError(ProviderError):
    """A content part kind is not recognized by this build."""

    def __init__(self, turn_index: int, kind: str) -> None:
        super().__init__(
            code=ErrorCode.VALIDATION,
            message=f"Turn {turn_index} has unsupported content part kind '{kind}'",
            provider="normalizer",
        )
        self.turn_index = turn_index
        self.kind = kind


__all__ = [
    "RegistryConfigError",
    "UnknownProviderError",
    "UnsupportedModelError",
    "MissingCredentialError",
    "NoProviderConfiguredError",
    "AllProvidersFailedError",
    "EmptyTurnError",
    "UnsupportedPartKindError",
]
