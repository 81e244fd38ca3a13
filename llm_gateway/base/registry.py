"""
Provider Registry

Holds the provider catalog built from configuration at start-up. The
registry is read-only after construction: there is no mutation API, and the
descriptors themselves are frozen.
"""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, Tuple

from .errors import RegistryConfigError, UnknownProviderError
from .models import ProviderDescriptor


class ProviderRegistry:
    """Immutable catalog of provider descriptors.

    Construction validates the catalog and raises ``RegistryConfigError`` for
    duplicate ids, empty supported-model sets, or a default model that is not
    in its supported set.
    """

    def __init__(self, descriptors: Iterable[ProviderDescriptor]) -> None:
        by_id: Dict[str, ProviderDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.id in by_id:
                raise RegistryConfigError(f"duplicate provider id '{descriptor.id}'")
            if not descriptor.supported_model_ids:
                raise RegistryConfigError(f"provider '{descriptor.id}' has no supported models")
            if descriptor.default_model_id not in descriptor.supported_model_ids:
                raise RegistryConfigError(
                    f"default model '{descriptor.default_model_id}' of provider "
                    f"'{descriptor.id}' is not in its supported models"
                )
            by_id[descriptor.id] = descriptor
        self._by_id = by_id
        # sorted() is stable: insertion order breaks priority ties
        self._ordered: Tuple[ProviderDescriptor, ...] = tuple(
            sorted(by_id.values(), key=lambda d: d.priority)
        )

    def list(self) -> Tuple[ProviderDescriptor, ...]:
        """Return all descriptors by ascending priority."""
        return self._ordered

    def get(self, provider_id: str) -> ProviderDescriptor:
        try:
            return self._by_id[provider_id]
        except KeyError:
            raise UnknownProviderError(provider_id) from None

    def __contains__(self, provider_id: object) -> bool:
        return provider_id in self._by_id

    def __iter__(self) -> Iterator[ProviderDescriptor]:
        return iter(self._ordered)

    def __len__(self) -> int:
        return len(self._ordered)


__all__ = ["ProviderRegistry"]
