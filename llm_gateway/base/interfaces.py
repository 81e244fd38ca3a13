"""
Provider interface contracts public surface.

Re-exports the Protocols under ``llm_gateway.base.interfaces_parts``.
"""

from .interfaces_parts.model_handle import ModelHandle
from .interfaces_parts.provider_backend import ProviderBackend

__all__ = ["ModelHandle", "ProviderBackend"]
