"""Payload, data-kind and metadata types shared by detection and loading."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any


class DataKind(StrEnum):
    """Closed set of payload kinds. Exactly one is assigned per payload."""

    CLAUDE_CONVERSATION = "claude-conversation"
    CHATGPT_CONVERSATION = "chatgpt-conversation"
    # Assigned from a filename hint only; never structurally validated.
    CLOUDWATCH_LOGS = "cloudwatch-logs"
    GENERIC_JSON = "generic-json"
    GENERIC_YAML = "generic-yaml"
    UNKNOWN = "unknown"

    @property
    def is_conversation(self) -> bool:
        return self in (DataKind.CLAUDE_CONVERSATION, DataKind.CHATGPT_CONVERSATION)


class SerializationKind(StrEnum):
    JSON = "json"
    YAML = "yaml"


@dataclass(frozen=True)
class RawPayload:
    """A parsed JSON/YAML value and where it came from."""

    data: Any
    filename: str
    serialization: SerializationKind = SerializationKind.JSON


@dataclass
class DataMetadata:
    """Display metadata computed once per loaded file."""

    filename: str
    estimated_type: DataKind
    parse_time: datetime
    file_size: int | None = None
    record_count: int | None = None

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["estimated_type"] = self.estimated_type.value
        d["parse_time"] = self.parse_time.isoformat()
        return d


@dataclass
class ParsedData:
    """Result of loading a file: the raw value, its kind and metadata."""

    raw: Any
    kind: DataKind
    metadata: DataMetadata

    @property
    def record_count(self) -> int | None:
        return self.metadata.record_count
