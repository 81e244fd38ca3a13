"""
Static description of one configured provider.

Descriptors are built once from configuration at start-up and are never
mutated afterwards. Consistency (non-empty model set, default model in set)
is enforced by ``ProviderRegistry``, not here.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Tuple


@dataclass(frozen=True)
class ProviderDescriptor:
    """Catalog entry for a provider.

    Attributes:
        id: Stable provider identifier (``"openai"``, ``"anthropic"`` ...).
        credential_key: Environment variable holding the API key, or ``None``
            for keyless local backends.
        default_model_id: Model used when the caller does not pin one.
        supported_model_ids: Models accepted for this provider.
        priority: Routing order; lower values are tried first.
        credential_aliases: Alternative variable names checked after
            ``credential_key``.
        base_url: Optional endpoint override for the backend.
    """

    id: str
    credential_key: Optional[str]
    default_model_id: str
    supported_model_ids: FrozenSet[str]
    priority: int = 0
    credential_aliases: Tuple[str, ...] = field(default_factory=tuple)
    base_url: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.supported_model_ids, frozenset):
            object.__setattr__(self, "supported_model_ids", frozenset(self.supported_model_ids))
        if not isinstance(self.credential_aliases, tuple):
            object.__setattr__(self, "credential_aliases", tuple(self.credential_aliases))

    @property
    def requires_credential(self) -> bool:
        return self.credential_key is not None

    def supports(self, model_id: str) -> bool:
        return model_id in self.supported_model_ids


__all__ = ["ProviderDescriptor"]
