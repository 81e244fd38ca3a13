"""
Structured gateway error exception type.

Wraps routing, validation and provider-specific failures with a normalized
`ErrorCode` for consistent handling and structured logging.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_code import ErrorCode


@dataclass
class ProviderError(Exception):
    """Represents a structured gateway error with a normalized error code.

    Attributes:
        code: Normalized :class:`ErrorCode` classification for the failure.
        message: Human-readable error message suitable for logging.
        provider: Provider id where the error originated (e.g., ``"openai"``),
            or ``"router"`` / ``"normalizer"`` for gateway-internal stages.
        model: Optional model id associated with the failure.
        retryable: Hint for upstream callers (not authoritative; the gateway
            itself never retries).
        raw: Optional original exception for diagnostics.
    """

    code: ErrorCode
    message: str
    provider: str
    model: Optional[str] = None
    retryable: bool = False
    raw: Optional[Exception] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        """Return a compact string combining provider, model, code, and message."""
        return f"{self.provider}:{self.model or '-'} {self.code.value}: {self.message}"

    def reason(self) -> str:
        """Return the ``"<code>: <message>"`` form used in traces and chunks."""
        return f"{self.code.value}: {self.message}"


__all__ = ["ProviderError"]
