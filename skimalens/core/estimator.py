"""Record count estimation for the metadata panel."""

from __future__ import annotations

from typing import Any

from skimalens.core.types import DataKind
from skimalens.providers.registry import find_provider_config


def estimate_record_count(data: Any, kind: DataKind) -> int | None:
    """Size of *data* as the viewer reports it.

    Conversation kinds use their provider's counting rule (messages for
    Claude, raw mapping nodes for ChatGPT). Everything else, including a
    conversation payload that only matched by filename, counts top-level
    list items. ``None`` means no count is available.
    """
    provider = find_provider_config(kind)
    if provider is not None:
        count = provider.count_records(data)
        if count is not None:
            return count

    if isinstance(data, list):
        return len(data)
    return None
