"""Message normalization helpers shared across backends.

``to_core`` is the single contract that turns request turns into
``CoreMessage`` values. Helpers here are side-effect free and operate on
provider-agnostic DTOs only.
"""
from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from ..errors import EmptyTurnError, UnsupportedPartKindError
from ..models import TEXT_PART, ConversationTurn, CoreMessage


def _validate(turns: Sequence[ConversationTurn]) -> None:
    for index, turn in enumerate(turns):
        if not turn.parts:
            raise EmptyTurnError(index)
        for part in turn.parts:
            if part.type != TEXT_PART:
                raise UnsupportedPartKindError(index, part.type)


def to_core(turns: Sequence[ConversationTurn]) -> Tuple[CoreMessage, ...]:
    """Convert request turns into normalized core messages.

    Summary
    - One ``CoreMessage`` per turn, same order, same role.
    - Text parts of a turn are concatenated with no separator.

    Failure modes
    - ``EmptyTurnError`` for a turn with zero parts.
    - ``UnsupportedPartKindError`` for a part whose kind is not ``"text"``.
    - The whole conversation is validated before anything is built, so a
      failure never yields partial output.
    """
    _validate(turns)
    return tuple(
        CoreMessage(role=turn.role, content="".join(part.text or "" for part in turn.parts))
        for turn in turns
    )


def split_system(messages: Sequence[CoreMessage]) -> Tuple[Optional[str], List[CoreMessage]]:
    """Separate system messages from the chat history.

    Returns ``(system_text, rest)`` where ``system_text`` joins every system
    message with blank lines (``None`` when there is none). Used by backends
    whose APIs take the system prompt as a separate parameter.
    """
    system_parts: List[str] = []
    rest: List[CoreMessage] = []
    for message in messages:
        if message.role == "system":
            system_parts.append(message.content)
        else:
            rest.append(message)
    return ("\n\n".join(system_parts) if system_parts else None), rest


def last_user_text(messages: Sequence[CoreMessage]) -> str:
    """Return the content of the most recent user message (``""`` if none)."""
    for message in reversed(messages):
        if message.role == "user":
            return message.content
    return ""


__all__ = ["to_core", "split_system", "last_user_text"]
