"""Groq provider backend."""

from .client import GroqBackend

__all__ = ["GroqBackend"]
