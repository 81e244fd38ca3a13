"""Mock provider package for offline streaming."""

from .client import MockBackend, MockHandle, MockOptions

__all__ = ["MockBackend", "MockHandle", "MockOptions"]
