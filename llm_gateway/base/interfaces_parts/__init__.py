"""Interfaces parts package: one Protocol per module."""

from .model_handle import ModelHandle
from .provider_backend import ProviderBackend

__all__ = ["ModelHandle", "ProviderBackend"]
