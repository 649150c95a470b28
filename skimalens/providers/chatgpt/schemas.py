"""Pydantic schema for the header of a raw ChatGPT ``conversations.json`` entry."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class ChatGPTConversation(BaseModel):
    """One conversation: a message tree stored as a flat ``mapping``.

    Nodes stay raw. Root and system nodes routinely break any message shape
    (``message: null``, ``children: null``), and only the nodes that
    :func:`~skimalens.providers.chatgpt.flattener.extract_messages` keeps are
    ever rendered.
    """

    model_config = ConfigDict(extra="allow")

    id: str | None = None
    conversation_id: str | None = None
    title: str
    create_time: float
    update_time: float
    mapping: dict[str, Any]
