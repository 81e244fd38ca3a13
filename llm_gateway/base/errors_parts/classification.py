"""
Error classification helpers mapping exceptions to normalized ErrorCode values.

Implements HTTP status extraction, status-to-code mapping, and message-based
heuristics as a fallback so failures from the OpenAI, Anthropic and Google SDKs
(and plain transport errors) land in one taxonomy. Also provides
``sanitize_error_message`` which masks API keys before a message is logged or
surfaced in a terminal stream chunk.
"""
from __future__ import annotations

import asyncio
import re
from typing import Dict, Optional

from .error_code import ErrorCode
from .provider_error import ProviderError


def _extract_status(exc: Exception) -> Optional[int]:
    """Attempt to extract an HTTP status code from a provider exception.

    Supported attribute shapes (checked in order):
    - ``exc.status_code``
    - ``exc.status``
    - ``exc.code`` (google-genai ``APIError``)
    - ``exc.response.status_code``
    Returns ``None`` if no valid status can be found.
    """
    for attr in ("status_code", "status", "code"):
        val = getattr(exc, attr, None)
        if isinstance(val, int) and 100 <= val < 600:
            return val
    resp = getattr(exc, "response", None)
    if resp is not None:
        sc = getattr(resp, "status_code", None)
        if isinstance(sc, int) and 100 <= sc < 600:
            return sc
    return None


_HTTP_STATUS_MAP: Dict[int, ErrorCode] = {
    400: ErrorCode.VALIDATION,
    401: ErrorCode.AUTH,
    402: ErrorCode.PAYMENT_REQUIRED,
    403: ErrorCode.AUTH,
    404: ErrorCode.NOT_FOUND,
    408: ErrorCode.TIMEOUT,
    413: ErrorCode.CONTEXT_LENGTH,
    422: ErrorCode.VALIDATION,
    429: ErrorCode.RATE_LIMIT,
    500: ErrorCode.SERVER_ERROR,
    502: ErrorCode.TRANSIENT,
    503: ErrorCode.UNAVAILABLE,
    504: ErrorCode.TIMEOUT,
    529: ErrorCode.UNAVAILABLE,
}

# Ordered: the first matching group wins.
_PATTERN_GROUPS = (
    (ErrorCode.RATE_LIMIT, ("rate limit", "rate_limit", "too many requests")),
    (ErrorCode.PAYMENT_REQUIRED, ("quota", "billing", "payment", "insufficient")),
    (ErrorCode.AUTH, ("api key", "unauthorized", "forbidden", "authentication")),
    (ErrorCode.CONTEXT_LENGTH, ("context_length", "context length", "maximum context", "too long")),
    (ErrorCode.CONTENT_POLICY, ("content policy", "content_filter", "safety", "moderation")),
    (ErrorCode.NOT_FOUND, ("model not found", "no such model", "not found", "does not exist")),
    (ErrorCode.TIMEOUT, ("timeout", "timed out")),
    (ErrorCode.UNAVAILABLE, ("unavailable", "overloaded", "maintenance", "connection", "econnrefused")),
    (ErrorCode.UNSUPPORTED, ("unsupported", "not supported")),
    (ErrorCode.VALIDATION, ("validation", "invalid", "malformed", "bad request")),
    (ErrorCode.SERVER_ERROR, ("server error", "internal error")),
)


def _heuristic_from_message(msg: str) -> Optional[ErrorCode]:
    """Substring heuristic mapping for exceptions without an HTTP status."""
    for code, patterns in _PATTERN_GROUPS:
        if any(p in msg for p in patterns):
            return code
    return None


def classify_exception(exc: Exception) -> ErrorCode:
    """Classify an exception into a normalized :class:`ErrorCode`.

    Precedence:
        1. ProviderError passthrough.
        2. Timeout exceptions (sync/async).
        3. HTTP status mapping.
        4. Substring heuristics.
        5. ``UNKNOWN`` fallback.
    """
    if isinstance(exc, ProviderError):
        return exc.code
    if isinstance(exc, (TimeoutError, asyncio.TimeoutError)):
        return ErrorCode.TIMEOUT
    status = _extract_status(exc)
    if status is not None and status in _HTTP_STATUS_MAP:
        return _HTTP_STATUS_MAP[status]
    code = _heuristic_from_message(str(exc).lower())
    return code if code is not None else ErrorCode.UNKNOWN


_KEY_PATTERNS = (
    re.compile(r"sk-[A-Za-z0-9_-]{16,}"),
    re.compile(r"gsk_[A-Za-z0-9]{16,}"),
    re.compile(r"AIza[0-9A-Za-z_-]{20,}"),
)


def sanitize_error_message(message: str) -> str:
    """Mask API keys that may have leaked into an upstream error message.

    ``sk-…`` keys become ``sk-****``; Groq (``gsk_``) and Google (``AIza``)
    keys are masked the same way.
    """
    masked = _KEY_PATTERNS[0].sub("sk-****", message)
    masked = _KEY_PATTERNS[1].sub("gsk_****", masked)
    return _KEY_PATTERNS[2].sub("AIza****", masked)


def describe_exception(exc: Exception) -> str:
    """Return the sanitized ``"<code>: <message>"`` form of an exception."""
    if isinstance(exc, ProviderError):
        return sanitize_error_message(exc.reason())
    text = str(exc) or exc.__class__.__name__
    return f"{classify_exception(exc).value}: {sanitize_error_message(text)}"


__all__ = [
    "classify_exception",
    "describe_exception",
    "sanitize_error_message",
    "_extract_status",
    "_HTTP_STATUS_MAP",
]
