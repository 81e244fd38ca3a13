"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `llm_gateway.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .provider_error import ProviderError
from .classification import classify_exception, describe_exception, sanitize_error_message
from .gateway_errors import (
    AllProvidersFailedError,
    EmptyTurnError,
    MissingCredentialError,
    NoProviderConfiguredError,
    RegistryConfigError,
    UnknownProviderError,
    UnsupportedModelError,
    UnsupportedPartKindError,
)

__all__ = [
    "ErrorCode",
    "ProviderError",
    "classify_exception",
    "describe_exception",
    "sanitize_error_message",
    "AllProvidersFailedError",
    "EmptyTurnError",
    "MissingCredentialError",
    "NoProviderConfiguredError",
    "RegistryConfigError",
    "UnknownProviderError",
    "UnsupportedModelError",
    "UnsupportedPartKindError",
]
