"""OpenAI provider backend."""

from .client import OpenAIBackend

__all__ = ["OpenAIBackend"]
