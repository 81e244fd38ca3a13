"""
Repositories package for the gateway base layer.

Exports:
- CredentialResolver / KeyResolution: provider credential resolution
"""

from .keys import CredentialResolver, KeyResolution

__all__ = ["CredentialResolver", "KeyResolution"]
