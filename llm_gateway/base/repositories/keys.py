"""
Credential Resolver

Purpose
- Decide whether a provider has a complete local configuration.
- Return the credential value for a provider when one is configured.

Design
- Reads only the environment snapshot supplied at construction (normally the
  ``GatewayConfig.environ`` built at start-up); never touches ``os.environ``
  or the network.
- Non-throwing accessors: unresolved credentials come back as ``None``.
- Blank and whitespace-only values count as absent; any other value is used
  as given. Placeholder-looking values only matter when the snapshot is
  built: there a ``.env`` entry may replace them (``load_environment``).

Usage
- resolver = CredentialResolver({"OPENAI_API_KEY": "sk-..."})
- resolver.is_usable(descriptor)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from ..models import ProviderDescriptor


@dataclass(frozen=True)
class KeyResolution:
    provider: str
    api_key: Optional[str]
    source: str  # "env", "keyless", "none"
    env_var: Optional[str] = None


class CredentialResolver:
    """Resolve provider credentials from an immutable environment snapshot.

    Resolution order for a descriptor: ``credential_key`` first, then each of
    ``credential_aliases``. Blank values are skipped.
    """

    def __init__(self, environ: Mapping[str, str]) -> None:
        self._environ = dict(environ)

    def get_resolution(self, descriptor: ProviderDescriptor) -> KeyResolution:
        if not descriptor.requires_credential:
            return KeyResolution(provider=descriptor.id, api_key=None, source="keyless")
        for name in (descriptor.credential_key, *descriptor.credential_aliases):
            raw = self._environ.get(name)  # type: ignore[arg-type]
            if raw is None:
                continue
            value = raw.strip()
            if not value:
                continue
            return KeyResolution(provider=descriptor.id, api_key=value, source="env", env_var=name)
        return KeyResolution(provider=descriptor.id, api_key=None, source="none")

    def resolve(self, descriptor: ProviderDescriptor) -> Optional[str]:
        """Return the credential value, or ``None`` when absent or keyless."""
        return self.get_resolution(descriptor).api_key

    def is_usable(self, descriptor: ProviderDescriptor) -> bool:
        """True iff the provider is keyless or has a non-blank credential configured."""
        return self.get_resolution(descriptor).source != "none"


__all__ = ["CredentialResolver", "KeyResolution"]
