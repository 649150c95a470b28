"""Claude export predicates, validation and timeline normalization.

Claude exports are already flat: a conversation carries its
``chat_messages`` in order, so normalizing is validation plus a stable
chronological sort at the point of consumption.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from datetime import UTC, datetime
from typing import Any

from skimalens.core.exceptions import FormatError
from skimalens.core.models import NormalizedMessage, classify_role

logger = logging.getLogger(__name__)

INVALID_FORMAT_MESSAGE = "Invalid Claude conversation format"

_CONVERSATION_KEYS = ("chat_messages", "uuid", "name", "created_at", "updated_at")
_MESSAGE_KEYS = ("uuid", "sender", "text", "created_at")
_STRICT_MESSAGE_KEYS = ("uuid", "text", "sender")


# ---------------------------------------------------------------------------
# Structural predicates
# ---------------------------------------------------------------------------


def is_claude_conversation(data: Any) -> bool:
    """Strict single-conversation match.

    String ``uuid`` and ``name`` plus a non-empty ``chat_messages`` list
    whose every element is a mapping holding ``uuid``, ``text`` and
    ``sender``.
    """
    if not isinstance(data, Mapping):
        return False
    messages = data.get("chat_messages")
    return (
        isinstance(data.get("uuid"), str)
        and isinstance(data.get("name"), str)
        and isinstance(messages, list)
        and len(messages) > 0
        and all(
            isinstance(msg, Mapping) and all(k in msg for k in _STRICT_MESSAGE_KEYS)
            for msg in messages
        )
    )


def looks_like_claude_conversation(data: Any) -> bool:
    """Loose structural match on key presence only.

    When ``chat_messages`` is a non-empty list starting with a mapping or a
    list, that first message must carry the Claude message keys as well; a
    list never does. Scalars and ``None`` in first position are not checked.
    """
    if not isinstance(data, Mapping):
        return False

    has_conversation_keys = all(k in data for k in _CONVERSATION_KEYS)

    messages = data.get("chat_messages")
    if isinstance(messages, list) and messages:
        first = messages[0]
        if isinstance(first, list):
            return False
        if isinstance(first, Mapping):
            return has_conversation_keys and all(k in first for k in _MESSAGE_KEYS)

    return has_conversation_keys


def is_claude_conversations(data: Any) -> bool:
    """Non-empty list where every element matches strictly or loosely."""
    if not isinstance(data, list) or not data:
        return False
    return all(
        is_claude_conversation(item) or looks_like_claude_conversation(item)
        for item in data
    )


# ---------------------------------------------------------------------------
# Validation + counting
# ---------------------------------------------------------------------------


def validate_claude_conversation(data: Any) -> Mapping[str, Any] | list[Any]:
    """Return *data* unchanged if it is a Claude conversation or a list of them.

    Raises :class:`FormatError` otherwise.
    """
    if is_claude_conversation(data):
        return data
    if is_claude_conversations(data):
        return data
    raise FormatError(INVALID_FORMAT_MESSAGE)


def count_claude_records(data: Any) -> int | None:
    """Message count for one conversation, summed across a list.

    Returns ``None`` when *data* matches neither shape.
    """
    if is_claude_conversation(data):
        return len(data["chat_messages"])
    if is_claude_conversations(data):
        return sum(_message_count(conv) for conv in data)
    return None


def _message_count(conversation: Mapping[str, Any]) -> int:
    messages = conversation.get("chat_messages")
    return len(messages) if isinstance(messages, list) else 0


# ---------------------------------------------------------------------------
# Ordering + normalization
# ---------------------------------------------------------------------------


def parse_timestamp(value: Any) -> float | None:
    """ISO-8601 string or ``datetime`` → epoch seconds. ``None`` if it does not parse."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.timestamp()


def _created_at_key(message: Mapping[str, Any]) -> float:
    ts = parse_timestamp(message.get("created_at"))
    return float("-inf") if ts is None else ts


def sort_claude_messages(messages: Sequence[Mapping[str, Any]]) -> list[Mapping[str, Any]]:
    """Messages ordered by ``created_at`` ascending.

    Ties keep their original order; unparseable timestamps sort first.
    Returns a new list.
    """
    return sorted(messages, key=_created_at_key)


def normalize_claude_messages(conversation: Mapping[str, Any]) -> list[NormalizedMessage]:
    """Build the chronological :class:`NormalizedMessage` timeline."""
    raw_messages = conversation.get("chat_messages") or []
    messages = [m for m in raw_messages if isinstance(m, Mapping)]
    if len(messages) != len(raw_messages):
        logger.warning(
            "Skipped %d non-object messages in conversation %s",
            len(raw_messages) - len(messages),
            conversation.get("uuid"),
        )

    return [
        NormalizedMessage(
            id=str(msg.get("uuid", "")),
            role=classify_role(msg.get("sender")),
            text=str(msg.get("text") or ""),
            create_time=parse_timestamp(msg.get("created_at")),
            source=msg,
        )
        for msg in sort_claude_messages(messages)
    ]
