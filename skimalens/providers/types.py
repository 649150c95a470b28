from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from skimalens.core.models import NormalizedMessage

Conversation = Mapping[str, Any]


@dataclass(frozen=True)
class ProviderConfig:
    """Everything downstream consumers need to handle one producer schema.

    Each conversation family registers its predicates and accessors here so
    the estimator, viewer and exporter dispatch on :class:`DataKind`
    instead of branching on field names.
    """

    name: str
    """Display name (e.g. ``"Claude"``)."""

    validate: Callable[[Any], Conversation | list[Any]]
    """Strict validation. Returns the input unchanged or raises ``FormatError``."""

    count_records: Callable[[Any], int | None]
    """Record count for the metadata panel, ``None`` if the shape is wrong."""

    timeline: Callable[[Conversation], list[NormalizedMessage]]
    """Chronological normalized messages of one conversation."""

    id_field: str
    title_field: str
    updated_field: str
    created_field: str

    def conversations(self, data: Any) -> list[Conversation]:
        """Validate *data* and always return a list of conversations."""
        validated = self.validate(data)
        if isinstance(validated, list):
            return validated
        return [validated]

    def conversation_id(self, conversation: Conversation) -> str:
        return str(conversation.get(self.id_field) or "")

    def title(self, conversation: Conversation) -> str:
        value = conversation.get(self.title_field)
        return value if isinstance(value, str) else ""
