"""Custom OpenAI-compatible provider backend."""

from .client import CustomBackend

__all__ = ["CustomBackend"]
