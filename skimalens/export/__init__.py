from skimalens.export.exporter import (
    ConversationExporter,
    ExportFormat,
    ExportOptions,
    FilenameFormat,
    generate_filename,
    render_conversation,
    sanitize_filename,
)
from skimalens.export.markdown import chatgpt_to_markdown, claude_to_markdown

__all__ = [
    "ConversationExporter",
    "ExportFormat",
    "ExportOptions",
    "FilenameFormat",
    "chatgpt_to_markdown",
    "claude_to_markdown",
    "generate_filename",
    "render_conversation",
    "sanitize_filename",
]
