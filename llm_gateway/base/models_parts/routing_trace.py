"""Per-request record of the routing decision."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class RoutingTrace:
    """Which providers were considered and why each was passed over.

    A fresh trace is built for every request. ``attempted`` lists, in order,
    the providers a handle build was tried for; ``skipped`` lists providers
    filtered out before any build (missing credential). ``reason_per_attempt``
    holds a ``"<code>: <message>"`` string for every skipped or failed
    provider; the chosen provider has no entry.
    """

    attempted: List[str] = field(default_factory=list)
    chosen: Optional[str] = None
    reason_per_attempt: Dict[str, str] = field(default_factory=dict)
    skipped: List[str] = field(default_factory=list)

    def record_skip(self, provider_id: str, reason: str) -> None:
        self.skipped.append(provider_id)
        self.reason_per_attempt[provider_id] = reason

    def record_attempt(self, provider_id: str) -> None:
        self.attempted.append(provider_id)

    def record_failure(self, provider_id: str, reason: str) -> None:
        self.reason_per_attempt[provider_id] = reason

    def record_choice(self, provider_id: str) -> None:
        self.chosen = provider_id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "attempted": list(self.attempted),
            "skipped": list(self.skipped),
            "chosen": self.chosen,
            "reason_per_attempt": dict(self.reason_per_attempt),
        }


__all__ = ["RoutingTrace"]
