"""Google Gemini provider backend."""

from .client import GeminiBackend

__all__ = ["GeminiBackend"]
