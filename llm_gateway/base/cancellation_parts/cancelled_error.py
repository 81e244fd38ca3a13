"""Cancellation error type.

Defines the public ``CancelledError`` raised when a request-scoped
``CancellationToken`` is observed as cancelled. Kept apart from
``asyncio.CancelledError``: this one signals a caller's cooperative request,
not task cancellation by the event loop.
"""

from __future__ import annotations


class CancelledError(RuntimeError):
    """Raised when an operation is cancelled cooperatively."""


__all__ = ["CancelledError"]
