"""Listing, searching and filtering for the conversation viewer."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from skimalens.core.models import MessageRole, NormalizedMessage
from skimalens.core.types import ParsedData
from skimalens.providers.chatgpt.flattener import sort_by_create_time
from skimalens.providers.claude.normalizer import parse_timestamp
from skimalens.providers.registry import get_provider_config
from skimalens.providers.types import Conversation, ProviderConfig


@dataclass(frozen=True)
class ConversationSummary:
    """One row of the conversation list."""

    id: str
    title: str
    updated: float | None
    message_count: int
    deleted: bool


@dataclass(frozen=True)
class ConversationStats:
    total: int
    human: int
    assistant: int
    with_feedback: int = 0


def is_soft_deleted(title: str) -> bool:
    """Deleted conversations keep their data but have a blank name/title."""
    return not title.strip()


def _timestamp(value: Any) -> float | None:
    if isinstance(value, int | float) and not isinstance(value, bool):
        return float(value)
    return parse_timestamp(value)


def _summarize(provider: ProviderConfig, conversation: Conversation) -> ConversationSummary:
    title = provider.title(conversation)
    return ConversationSummary(
        id=provider.conversation_id(conversation),
        title=title,
        updated=_timestamp(conversation.get(provider.updated_field)),
        message_count=len(provider.timeline(conversation)),
        deleted=is_soft_deleted(title),
    )


def conversation_summaries(parsed: ParsedData) -> list[ConversationSummary]:
    """Summaries of every conversation in *parsed*, in file order.

    Raises ``UnsupportedDataKindError`` for non-conversation kinds and
    ``FormatError`` if the payload does not validate.
    """
    provider = get_provider_config(parsed.kind)
    return [_summarize(provider, conv) for conv in provider.conversations(parsed.raw)]


def list_conversations(
    summaries: Iterable[ConversationSummary],
    query: str = "",
    hide_deleted: bool = True,
) -> list[ConversationSummary]:
    """Filter by deletion state and a case-insensitive query on title or id,
    most recently updated first.
    """
    rows = list(summaries)
    if hide_deleted:
        rows = [r for r in rows if not r.deleted]

    needle = query.strip().lower()
    if needle:
        rows = [r for r in rows if needle in r.title.lower() or needle in r.id.lower()]

    return sorted(
        rows,
        key=lambda r: float("-inf") if r.updated is None else r.updated,
        reverse=True,
    )


def find_conversation(
    parsed: ParsedData, conversation_id: str
) -> Conversation | None:
    provider = get_provider_config(parsed.kind)
    for conv in provider.conversations(parsed.raw):
        if provider.conversation_id(conv) == conversation_id:
            return conv
    return None


def filter_messages(
    messages: Sequence[NormalizedMessage],
    query: str = "",
    sender: MessageRole | str | None = None,
) -> list[NormalizedMessage]:
    """Sender filter plus case-insensitive search over text and id.

    The result is in chronological order.
    """
    selected = list(messages)
    if sender is not None:
        role = MessageRole(sender)
        selected = [m for m in selected if m.role is role]

    needle = query.strip().lower()
    if needle:
        selected = [
            m for m in selected if needle in m.text.lower() or needle in m.id.lower()
        ]

    return sort_by_create_time(selected)


def conversation_stats(messages: Sequence[NormalizedMessage]) -> ConversationStats:
    human = sum(1 for m in messages if m.role is MessageRole.HUMAN)
    with_feedback = sum(
        1 for m in messages if isinstance(m.source.get("chat_feedback"), Mapping)
    )
    return ConversationStats(
        total=len(messages),
        human=human,
        assistant=len(messages) - human,
        with_feedback=with_feedback,
    )


def timeline(parsed: ParsedData, conversation: Conversation) -> list[NormalizedMessage]:
    """Chronological messages of one conversation from *parsed*."""
    if not parsed.kind.is_conversation:
        return []
    return get_provider_config(parsed.kind).timeline(conversation)

