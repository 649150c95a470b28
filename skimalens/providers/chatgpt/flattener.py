"""ChatGPT conversation predicates, validation and mapping flattening.

A ChatGPT conversation stores its messages as a tree encoded in a flat
``mapping`` of node id -> node. Flattening does not walk parent/children
links: it filters the node values and sorts the surviving messages by
``create_time``. Orphaned or multiply referenced nodes are therefore kept,
and branch structure (regenerated answers, edits) collapses into one
timeline.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from skimalens.core.exceptions import FormatError
from skimalens.core.models import NormalizedMessage, classify_role

logger = logging.getLogger(__name__)

INVALID_FORMAT_MESSAGE = "Invalid ChatGPT conversation format"


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


# ---------------------------------------------------------------------------
# Structural predicates
# ---------------------------------------------------------------------------


def is_chatgpt_conversation(data: Any) -> bool:
    """String ``title``, numeric ``create_time``/``update_time`` and an
    object ``mapping``.
    """
    if not isinstance(data, Mapping):
        return False
    return (
        isinstance(data.get("title"), str)
        and _is_number(data.get("create_time"))
        and _is_number(data.get("update_time"))
        and isinstance(data.get("mapping"), Mapping)
    )


def is_chatgpt_conversations(data: Any) -> bool:
    if not isinstance(data, list) or not data:
        return False
    return all(is_chatgpt_conversation(item) for item in data)


# ---------------------------------------------------------------------------
# Validation + counting
# ---------------------------------------------------------------------------


def validate_chatgpt_conversation(data: Any) -> Mapping[str, Any] | list[Any]:
    """Return *data* unchanged if it is a ChatGPT conversation or a list of them.

    Raises :class:`FormatError` otherwise.
    """
    if is_chatgpt_conversation(data):
        return data
    if is_chatgpt_conversations(data):
        return data
    raise FormatError(INVALID_FORMAT_MESSAGE)


def count_chatgpt_records(data: Any) -> int | None:
    """Number of ``mapping`` nodes, summed across a list.

    This is a raw node count: structural, system and empty nodes are
    included, so it is usually larger than the number of displayed
    messages.
    """
    if is_chatgpt_conversation(data):
        return len(data["mapping"])
    if is_chatgpt_conversations(data):
        return sum(len(conv["mapping"]) for conv in data)
    return None


# ---------------------------------------------------------------------------
# Flattening
# ---------------------------------------------------------------------------


def _text_parts(message: Mapping[str, Any]) -> list[str]:
    content = message.get("content")
    if not isinstance(content, Mapping):
        return []
    parts = content.get("parts")
    if not isinstance(parts, list):
        return []
    return [p for p in parts if isinstance(p, str) and p.strip()]


def _author_role(message: Mapping[str, Any]) -> str | None:
    author = message.get("author")
    if isinstance(author, Mapping):
        role = author.get("role")
        return role if isinstance(role, str) else None
    return None


def _create_time(message: Mapping[str, Any]) -> float | None:
    ts = message.get("create_time")
    return float(ts) if _is_number(ts) else None


def _displayable_messages(mapping: Mapping[str, Any]) -> Iterable[Mapping[str, Any]]:
    """Node messages that survive the structural/system/empty filters."""
    for node in mapping.values():
        if not isinstance(node, Mapping):
            continue
        message = node.get("message")
        if not isinstance(message, Mapping):
            continue
        if _author_role(message) == "system":
            continue
        if not _text_parts(message):
            continue
        yield message


def _create_time_key(message: NormalizedMessage) -> float:
    return float("-inf") if message.create_time is None else message.create_time


def sort_by_create_time(messages: Iterable[NormalizedMessage]) -> list[NormalizedMessage]:
    """Ascending by ``create_time`` with ``None`` first.

    Equal keys, including two ``None`` values, keep their input order, so
    applying the sort twice gives the same sequence.
    """
    return sorted(messages, key=_create_time_key)


def extract_messages(conversation: Mapping[str, Any]) -> list[NormalizedMessage]:
    """Flatten a conversation's ``mapping`` into a chronological timeline.

    Nodes without a message, system messages and messages without any
    non-blank string part are dropped. The input is not modified.
    """
    mapping = conversation.get("mapping")
    if not isinstance(mapping, Mapping):
        return []

    collected = [
        NormalizedMessage(
            id=str(message.get("id") or ""),
            role=classify_role(_author_role(message)),
            text="\n\n".join(_text_parts(message)),
            create_time=_create_time(message),
            source=message,
        )
        for message in _displayable_messages(mapping)
    ]

    logger.debug(
        "Flattened %d of %d mapping nodes for conversation %s",
        len(collected),
        len(mapping),
        conversation.get("id"),
    )
    return sort_by_create_time(collected)
