"""Write validated conversations to Markdown, JSON or YAML files."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Any

import yaml

from skimalens.core.exceptions import UnsupportedDataKindError
from skimalens.core.types import DataKind
from skimalens.export.markdown import chatgpt_to_markdown, claude_to_markdown
from skimalens.providers.registry import get_provider_config

logger = logging.getLogger(__name__)

MAX_FILENAME_LENGTH = 200

_INVALID_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')
_DASH_RUNS = re.compile(r"[-\s]+")


class ExportFormat(StrEnum):
    MARKDOWN = "markdown"
    JSON = "json"
    YAML = "yaml"

    @property
    def extension(self) -> str:
        return "md" if self is ExportFormat.MARKDOWN else self.value


class FilenameFormat(StrEnum):
    TITLE = "title"
    ID = "id"


@dataclass
class ExportOptions:
    output_dir: Path
    filename_format: FilenameFormat = FilenameFormat.TITLE
    export_format: ExportFormat = ExportFormat.MARKDOWN


# ── Filenames ───────────────────────────────────────────────────────


def sanitize_filename(name: str) -> str:
    """Make a conversation title safe to use as a file name."""
    sanitized = _INVALID_FILENAME_CHARS.sub("-", name)
    sanitized = _DASH_RUNS.sub("-", sanitized)
    sanitized = sanitized.strip().strip("-")
    sanitized = sanitized[:MAX_FILENAME_LENGTH]
    return sanitized or "untitled"


def generate_filename(
    title: str,
    conversation_id: str,
    filename_format: FilenameFormat,
    export_format: ExportFormat,
) -> str:
    if filename_format is FilenameFormat.TITLE:
        base = sanitize_filename(title)
    else:
        base = conversation_id or "untitled"
    return f"{base}.{export_format.extension}"


# ── Serializers ─────────────────────────────────────────────────────


def to_json(conversation: Mapping[str, Any]) -> str:
    return json.dumps(conversation, indent=2, ensure_ascii=False, default=str)


def to_yaml(conversation: Mapping[str, Any]) -> str:
    return yaml.safe_dump(
        dict(conversation),
        allow_unicode=True,
        sort_keys=False,
        indent=2,
        width=float("inf"),
    )


_MARKDOWN_RENDERERS: dict[DataKind, Callable[[Mapping[str, Any]], str]] = {
    DataKind.CLAUDE_CONVERSATION: claude_to_markdown,
    DataKind.CHATGPT_CONVERSATION: chatgpt_to_markdown,
}


def render_conversation(
    conversation: Mapping[str, Any], kind: DataKind, export_format: ExportFormat
) -> str:
    """Render one conversation of *kind* in *export_format*."""
    match export_format:
        case ExportFormat.MARKDOWN:
            renderer = _MARKDOWN_RENDERERS.get(kind)
            if renderer is None:
                raise UnsupportedDataKindError(str(kind))
            return renderer(conversation)
        case ExportFormat.JSON:
            return to_json(conversation)
        case ExportFormat.YAML:
            return to_yaml(conversation)


# ── Exporter ────────────────────────────────────────────────────────


class ConversationExporter:
    """Writes one file per conversation into ``options.output_dir``.

    Files are named from the conversation title (sanitized) or id; a later
    conversation with the same name overwrites the earlier file.
    """

    def __init__(self, options: ExportOptions) -> None:
        self.options = options

    def export(self, data: Any, kind: DataKind | str) -> list[Path]:
        """Validate *data* as *kind* and write it out. Returns written paths.

        Raises :class:`UnsupportedDataKindError` for non-conversation kinds
        and :class:`FormatError` if *data* does not validate.
        """
        provider = get_provider_config(kind)
        kind = DataKind(kind)
        conversations = provider.conversations(data)

        logger.info(
            "Exporting %d %s conversation(s) as %s",
            len(conversations),
            provider.name,
            self.options.export_format.value.upper(),
        )

        # Nothing is written unless every conversation renders.
        rendered = [
            (
                generate_filename(
                    provider.title(conversation),
                    provider.conversation_id(conversation),
                    self.options.filename_format,
                    self.options.export_format,
                ),
                render_conversation(conversation, kind, self.options.export_format),
            )
            for conversation in conversations
        ]

        self._ensure_directory()
        written: list[Path] = []
        for filename, content in rendered:
            path = self.options.output_dir / filename
            path.write_text(content, encoding="utf-8")
            logger.info("Exported %s", filename)
            written.append(path)
        return written

    def _ensure_directory(self) -> None:
        output_dir = self.options.output_dir
        if not output_dir.exists():
            output_dir.mkdir(parents=True, exist_ok=True)
            logger.info("Created directory: %s", output_dir)
