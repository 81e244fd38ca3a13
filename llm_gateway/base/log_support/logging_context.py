"""Structured logging context object for gateway events.

This module defines :class:`LogContext`, a dataclass carrying the common
fields of one request's log events (provider id, model id, request id and
extra metadata). ``to_dict`` merges ``extra`` and prunes ``None`` values.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict, field, replace
from typing import Any, Dict, Optional


@dataclass
class LogContext:
    """Structured context for gateway logging events."""

    provider: Optional[str] = None
    model: Optional[str] = None
    request_id: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        extra = data.pop("extra", {}) or {}
        data.update({k: v for k, v in extra.items() if v is not None})
        return {k: v for k, v in data.items() if v is not None}

    def bind(self, **changes: Any) -> "LogContext":
        """Return a copy with ``provider``/``model``/``request_id`` replaced."""
        return replace(self, extra=dict(self.extra), **changes)


__all__ = ["LogContext"]
