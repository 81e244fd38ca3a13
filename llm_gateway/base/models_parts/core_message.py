"""Normalized message shape consumed by every backend."""
from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Dict

from .conversation_turn import Role


@dataclass(frozen=True)
class CoreMessage:
    """Provider-neutral chat message with flattened text content."""

    role: Role
    content: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


__all__ = ["CoreMessage"]
