"""
Content part model for conversation turns.

A turn is made of one or more parts. Only ``"text"`` parts are understood by
the normalizer; any other kind is rejected with ``UnsupportedPartKindError``
rather than silently dropped, so ``type`` is kept as a free string here.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Literal, Optional

TEXT_PART = "text"

# Part kinds this build can normalize.
ContentPartType = Literal["text"]


@dataclass(frozen=True)
class ContentPart:
    """A single piece of turn content.

    Attributes:
        type: Semantic kind of the part, e.g. ``"text"``.
        text: Textual content for text parts.
        data: Opaque payload for non-text parts (images, files ...).
    """

    type: str
    text: Optional[str] = None
    data: Optional[Dict[str, Any]] = None

    @classmethod
    def of_text(cls, text: str) -> "ContentPart":
        return cls(type=TEXT_PART, text=text)

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable dictionary representation of the part."""
        return asdict(self)


__all__ = ["ContentPart", "ContentPartType", "TEXT_PART"]
