"""Markdown rendering for Claude and ChatGPT conversations."""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from skimalens.core.exceptions import FormatError
from skimalens.core.models import NormalizedMessage
from skimalens.providers.chatgpt.flattener import (
    INVALID_FORMAT_MESSAGE as CHATGPT_INVALID,
)
from skimalens.providers.chatgpt.flattener import extract_messages
from skimalens.providers.chatgpt.schemas import ChatGPTConversation
from skimalens.providers.claude.normalizer import (
    INVALID_FORMAT_MESSAGE as CLAUDE_INVALID,
)
from skimalens.providers.claude.schemas import (
    ClaudeConversation,
    ClaudeFile,
    ClaudeMessage,
)

_DATE_FORMAT = "%m/%d/%Y, %H:%M:%S"


# ── Formatting helpers ──────────────────────────────────────────────


def format_date(value: str | None) -> str:
    """ISO-8601 → ``MM/DD/YYYY, HH:MM:SS`` in UTC; echoes unparseable input."""
    if value is None:
        return "Unknown"
    try:
        parsed = datetime.fromisoformat(value)
    except (TypeError, ValueError):
        return str(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC).strftime(_DATE_FORMAT)


def format_timestamp(value: float | None) -> str:
    """Unix seconds → ``MM/DD/YYYY, HH:MM:SS`` in UTC."""
    if value is None:
        return "Unknown"
    try:
        return datetime.fromtimestamp(float(value), tz=UTC).strftime(_DATE_FORMAT)
    except (OverflowError, OSError, ValueError):
        return str(value)


def format_file_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


M = TypeVar("M", bound=BaseModel)


def _validate(
    model: type[M], data: Mapping[str, Any], message: str
) -> M:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise FormatError(f"{message}: {exc.error_count()} invalid field(s)") from exc


# ── Claude ──────────────────────────────────────────────────────────


def _file_lines(label: str, files: list[ClaudeFile]) -> list[str]:
    lines = [f"**{label}:**"]
    for f in files:
        lines.append(f"- {f.file_name} ({f.file_type}, {format_file_size(f.file_size)})")
        if f.extracted_content:
            lines.extend(["  ```", f.extracted_content, "  ```"])
    lines.append("")
    return lines


def claude_message_to_markdown(message: ClaudeMessage) -> str:
    sender = "Human" if message.sender == "human" else "Assistant"
    lines = [f"## {sender} ({format_date(message.created_at)})", ""]

    if message.text:
        lines.extend([message.text, ""])

    for block in message.content or []:
        if block.type == "thinking" and block.thinking:
            lines.extend(["### Thinking", "", block.thinking, ""])
        elif block.type == "text" and block.text and block.text != message.text:
            lines.extend([block.text, ""])

    if message.attachments:
        lines.extend(_file_lines("Attachments", message.attachments))
    if message.files:
        lines.extend(_file_lines("Files", message.files))

    feedback = message.chat_feedback
    if feedback is not None:
        emoji = "👍" if feedback.type == "good" else "👎"
        lines.append(f"**Feedback:** {emoji} {feedback.type}")
        if feedback.reason:
            lines.append(f"**Reason:** {feedback.reason}")
        lines.append("")

    lines.append("---")
    return "\n".join(lines)


def claude_to_markdown(data: Mapping[str, Any]) -> str:
    """Render one Claude conversation, messages in export order."""
    conversation = _validate(ClaudeConversation, data, CLAUDE_INVALID)
    lines = [
        f"# {conversation.name or ''}",
        "",
        f"**Created:** {format_date(conversation.created_at)}",
        f"**Updated:** {format_date(conversation.updated_at)}",
        f"**ID:** {conversation.uuid or ''}",
        "",
        "---",
        "",
    ]
    for message in conversation.chat_messages:
        lines.extend([claude_message_to_markdown(message), ""])
    return "\n".join(lines)


# ── ChatGPT ─────────────────────────────────────────────────────────


def chatgpt_message_to_markdown(message: NormalizedMessage) -> str:
    """Render one flattened message; ``source`` supplies the raw metadata."""
    role = "User" if message.is_human else "Assistant"
    lines = [f"## {role} ({format_timestamp(message.create_time)})", "", message.text, ""]

    metadata = message.source.get("metadata")
    if isinstance(metadata, Mapping) and metadata:
        lines.extend(
            [
                "**Metadata:**",
                "```json",
                json.dumps(metadata, indent=2, ensure_ascii=False, default=str),
                "```",
                "",
            ]
        )

    lines.append("---")
    return "\n".join(lines)


def chatgpt_to_markdown(data: Mapping[str, Any]) -> str:
    """Render one ChatGPT conversation as its flattened timeline.

    Only the header is validated. Mapping nodes go through
    :func:`extract_messages`, so structural and system nodes never have to
    match a message shape.
    """
    conversation = _validate(ChatGPTConversation, data, CHATGPT_INVALID)
    lines = [
        f"# {conversation.title}",
        "",
        f"**Created:** {format_timestamp(conversation.create_time)}",
        f"**Updated:** {format_timestamp(conversation.update_time)}",
        f"**ID:** {conversation.id or ''}",
    ]
    if conversation.conversation_id:
        lines.append(f"**Conversation ID:** {conversation.conversation_id}")
    lines.extend(["", "---", ""])

    for message in extract_messages(data):
        lines.extend([chatgpt_message_to_markdown(message), ""])
    return "\n".join(lines)
