"""OpenRouter provider backend."""

from .client import OpenRouterBackend

__all__ = ["OpenRouterBackend"]
