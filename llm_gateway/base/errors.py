"""Unified gateway error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``llm_gateway.base.errors_parts`` to maintain a stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.provider_error import ProviderError
from .errors_parts.classification import classify_exception, describe_exception, sanitize_error_message
from .errors_parts.gateway_errors import (
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
