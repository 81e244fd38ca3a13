"""ProviderBackend Protocol (single-class module).

The one capability the factory needs from a vendor integration: turn a model
id and a credential into a ``ModelHandle``. Building must not suspend or
perform I/O.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from .model_handle import ModelHandle


@runtime_checkable
class ProviderBackend(Protocol):
    """Factory for request-scoped model handles of one provider."""

    def build(self, model_id: str, credential: Optional[str]) -> ModelHandle:  # pragma: no cover - interface
        """Return a handle for ``model_id``; raise ``ProviderError`` on invalid input."""
        ...
