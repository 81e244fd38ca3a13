"""Anthropic provider backend."""

from .client import AnthropicBackend

__all__ = ["AnthropicBackend"]
