"""
Completion settings passed through to the upstream model.

All fields are optional. Ranges are validated at construction so a bad
value fails before any provider is contacted.
"""
from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional, Tuple, Union

Number = Union[int, float]

_RANGES: Dict[str, Tuple[Number, Number]] = {
    "temperature": (0.0, 2.0),
    "max_tokens": (1, 1_000_000),
    "top_p": (0.0, 1.0),
    "top_k": (0, 100),
    "frequency_penalty": (-2.0, 2.0),
    "presence_penalty": (-2.0, 2.0),
}


@dataclass(frozen=True)
class CompletionSettings:
    """Sampling and length controls for one request.

    Raises:
        ValueError: if a provided value falls outside its allowed range.
    """

    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    top_p: Optional[float] = None
    top_k: Optional[int] = None
    frequency_penalty: Optional[float] = None
    presence_penalty: Optional[float] = None

    def __post_init__(self) -> None:
        for name, (low, high) in _RANGES.items():
            value = getattr(self, name)
            if value is None:
                continue
            if not low <= value <= high:
                raise ValueError(f"{name} must be within [{low}, {high}], got {value}")

    def to_dict(self) -> Dict[str, Any]:
        """Return only the fields that were set."""
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}


__all__ = ["CompletionSettings"]
