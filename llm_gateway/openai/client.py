"""OpenAI backend built on the shared OpenAI-compatible implementation.

Requests a trailing usage chunk so token counts reach the observability
event.
"""

from __future__ import annotations

from ..base.openai_style_parts import OpenAIStyleBackend, OpenAIStyleInit
from ..config.defaults import OPENAI_DEFAULT_BASE_URL

__all__ = ["OpenAIBackend"]


class OpenAIBackend(OpenAIStyleBackend):
    """Backend for ``api.openai.com`` (or a compatible ``OPENAI_BASE_URL``)."""

    init = OpenAIStyleInit(
        provider_id="openai",
        default_base_url=OPENAI_DEFAULT_BASE_URL,
        include_usage=True,
    )
