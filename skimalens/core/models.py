"""The normalized message model consumed by the viewer and the exporter."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class MessageRole(StrEnum):
    HUMAN = "human"
    ASSISTANT = "assistant"


_HUMAN_ROLES = frozenset({"human", "user"})


def classify_role(raw_role: str | None) -> MessageRole:
    """Map a producer role (``human``, ``user``, ``assistant``, ``tool``...)
    onto the two display roles. Anything that is not the person is shown
    as the assistant.
    """
    if raw_role is not None and raw_role.strip().lower() in _HUMAN_ROLES:
        return MessageRole.HUMAN
    return MessageRole.ASSISTANT


@dataclass(frozen=True)
class NormalizedMessage:
    """One message of a flattened conversation timeline.

    ``source`` references the producer's raw message mapping so renderers
    can reach fields the normalized view does not carry (attachments,
    feedback, metadata). It is never modified.
    """

    id: str
    role: MessageRole
    text: str
    create_time: float | None = None
    source: Mapping[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def is_human(self) -> bool:
        return self.role is MessageRole.HUMAN
