"""
Conversation turn DTO as received from the request boundary.

Defines ``ConversationTurn`` and the ``Role`` literal. Turns are
chronological; the gateway never reorders them.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Tuple

from .content_part import ContentPart

Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class ConversationTurn:
    """One message of the incoming conversation.

    Attributes:
        role: Author role (``"system"``, ``"user"`` or ``"assistant"``).
        parts: Ordered content parts of the turn.
    """

    role: Role
    parts: Tuple[ContentPart, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        # accept lists from callers while keeping the instance hashable
        if not isinstance(self.parts, tuple):
            object.__setattr__(self, "parts", tuple(self.parts))

    @classmethod
    def text(cls, role: Role, text: str) -> "ConversationTurn":
        """Build a single-part text turn."""
        return cls(role=role, parts=(ContentPart.of_text(text),))


__all__ = ["ConversationTurn", "Role"]
