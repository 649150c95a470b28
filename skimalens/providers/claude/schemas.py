"""Pydantic schemas for Claude conversation exports."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ---------------------------------------------------------------------------
# Message parts
# ---------------------------------------------------------------------------


class _ExportModel(BaseModel):
    # Exports carry many undocumented fields; keep them for JSON/YAML dumps.
    model_config = ConfigDict(extra="allow")


class ClaudeSummary(_ExportModel):
    summary: str


class ClaudeContentBlock(_ExportModel):
    type: str
    text: str | None = None
    thinking: str | None = None
    summaries: list[ClaudeSummary] | None = None
    cut_off: bool | None = None
    start_timestamp: str | None = None
    stop_timestamp: str | None = None


class ClaudeFile(_ExportModel):
    file_name: str
    file_type: str = ""
    file_size: int = 0
    extracted_content: str | None = None


class ClaudeFeedback(_ExportModel):
    type: str
    uuid: str | None = None
    reason: str | None = None
    created_at: str | None = None


# ---------------------------------------------------------------------------
# Conversation
# ---------------------------------------------------------------------------


class ClaudeMessage(_ExportModel):
    # Only the first message of a loosely matched conversation is checked
    # for these keys, so any of them may be missing or null.
    uuid: str | None = None
    sender: str | None = None
    text: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    content: list[ClaudeContentBlock] | None = None
    attachments: list[ClaudeFile] | None = None
    files: list[ClaudeFile] | None = None
    chat_feedback: ClaudeFeedback | None = None


class ClaudeAccount(_ExportModel):
    uuid: str | None = None


class ClaudeConversation(_ExportModel):
    """One conversation from a Claude export.

    An empty ``name`` marks a conversation the user deleted; listings hide
    those by default.
    """

    uuid: str | None = None
    name: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    account: ClaudeAccount | None = None
    chat_messages: list[ClaudeMessage] = Field(default_factory=list)

    @field_validator("chat_messages", mode="before")
    @classmethod
    def _message_objects(cls, value: Any) -> list[Any]:
        if not isinstance(value, list):
            return []
        return [m for m in value if isinstance(m, Mapping)]
