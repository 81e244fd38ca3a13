"""
Pydantic DTOs for the inbound chat and model validation requests.

Purpose
-------
Validate the HTTP payloads of ``POST /api/chat/stream``, ``/api/chat/complete``
and ``/api/models/validate`` before they reach the gateway, converting chat
bodies into the domain ``StreamRequest``. Field names on the
wire are camelCase (``providerId``, ``modelId``); snake_case is accepted too.

External dependencies: Pydantic v2 only. No network calls, no timeouts.

Failure modes
-------------
Shape and range problems raise ``pydantic.ValidationError``. Part kinds are
deliberately not restricted here: an unknown ``type`` passes validation and is
rejected by the message normalizer with ``UnsupportedPartKindError``, so both
problems surface through the same error contract.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..models import CompletionSettings, ContentPart, ConversationTurn, Role
from ...gateway import StreamRequest


class ContentPartDTO(BaseModel):
    """One content part of a turn.

    Attributes:
        type: Part kind, e.g. ``"text"``.
        text: Text of a text part.
        data: Structured payload for non-text parts.
    """

    type: str = Field(..., min_length=1)
    text: Optional[str] = None
    data: Optional[Dict[str, Any]] = None

    def to_domain(self) -> ContentPart:
        return ContentPart(type=self.type, text=self.text, data=self.data)


class TurnDTO(BaseModel):
    """A conversation turn; ``content`` is either plain text or a list of parts.

    An empty parts list is accepted here and reported as ``EmptyTurnError`` by
    the gateway, which knows the turn's index.
    """

    role: Role
    content: Union[str, List[ContentPartDTO]]

    def to_domain(self) -> ConversationTurn:
        if isinstance(self.content, str):
            return ConversationTurn.text(self.role, self.content)
        return ConversationTurn(role=self.role, parts=tuple(p.to_domain() for p in self.content))


class SettingsDTO(BaseModel):
    """Completion settings; bounds mirror ``CompletionSettings``."""

    model_config = ConfigDict(populate_by_name=True)

    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)
    max_tokens: Optional[int] = Field(default=None, ge=1, le=1_000_000, alias="maxTokens")
    top_p: Optional[float] = Field(default=None, ge=0.0, le=1.0, alias="topP")
    top_k: Optional[int] = Field(default=None, ge=0, le=100, alias="topK")
    frequency_penalty: Optional[float] = Field(default=None, ge=-2.0, le=2.0, alias="frequencyPenalty")
    presence_penalty: Optional[float] = Field(default=None, ge=-2.0, le=2.0, alias="presencePenalty")

    def to_domain(self) -> CompletionSettings:
        return CompletionSettings(**self.model_dump(exclude_none=True))


class ChatStreamRequestDTO(BaseModel):
    """Request body of the streaming chat endpoint.

    Parameters:
        turns: Conversation, oldest first (non-empty).
        providerId: Pin a provider; disables fallback.
        modelId: Pin a model; defaults to the chosen provider's default.
        settings: Optional completion settings.

    Raises:
        ValidationError: On unknown roles, missing turns or out-of-range settings.
    """

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    turns: List[TurnDTO] = Field(..., min_length=1)
    provider_id: Optional[str] = Field(default=None, min_length=1, alias="providerId")
    model_id: Optional[str] = Field(default=None, min_length=1, alias="modelId")
    settings: Optional[SettingsDTO] = None

    def to_stream_request(self, request_id: Optional[str] = None) -> StreamRequest:
        """Convert to the gateway's ``StreamRequest``."""
        return StreamRequest(
            turns=tuple(t.to_domain() for t in self.turns),
            provider_id=self.provider_id,
            model_id=self.model_id,
            settings=self.settings.to_domain() if self.settings else None,
            request_id=request_id,
        )


class ValidateModelRequestDTO(BaseModel):
    """Request body of ``POST /api/models/validate``.

    Parameters:
        providerId: Provider to check (required).
        modelId: Model to check; defaults to the provider's default.
    """

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    provider_id: str = Field(..., min_length=1, alias="providerId")
    model_id: Optional[str] = Field(default=None, min_length=1, alias="modelId")


__all__ = ["ContentPartDTO", "TurnDTO", "SettingsDTO", "ChatStreamRequestDTO", "ValidateModelRequestDTO"]
