"""ModelHandle Protocol (single-class module).

A handle is request-scoped: it is built for one request, streamed at most
once and released with ``aclose``. Handles are never cached or shared.
"""

from __future__ import annotations

from typing import AsyncIterator, Optional, Protocol, Sequence, runtime_checkable

from ..models import CompletionSettings, CoreMessage, UpstreamDelta


@runtime_checkable
class ModelHandle(Protocol):
    """Ready-to-stream binding of one provider, one model and one credential."""

    provider_id: str
    model_id: str

    def stream(
        self,
        messages: Sequence[CoreMessage],
        settings: Optional[CompletionSettings] = None,
    ) -> AsyncIterator[UpstreamDelta]:  # pragma: no cover - interface
        """Return an async iterator of upstream deltas.

        Implementations must not contact the provider before the first pull.
        SDK errors are raised from the iterator unchanged.
        """
        ...

    async def aclose(self) -> None:  # pragma: no cover - interface
        """Release network clients and other resources held by the handle."""
        ...
