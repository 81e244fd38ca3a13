"""Ollama (local) provider backend."""

from .client import OllamaBackend

__all__ = ["OllamaBackend"]
