"""Detect, normalize and export Claude and ChatGPT conversation logs."""

from skimalens.core.detection import detect
from skimalens.core.estimator import estimate_record_count
from skimalens.core.exceptions import (
    FormatError,
    ParseError,
    SkimaLensError,
    UnsupportedDataKindError,
)
from skimalens.core.loader import load_file, load_text, parse_content, parse_data
from skimalens.core.models import MessageRole, NormalizedMessage
from skimalens.core.types import (
    DataKind,
    DataMetadata,
    ParsedData,
    RawPayload,
    SerializationKind,
)
from skimalens.export import (
    ConversationExporter,
    ExportFormat,
    ExportOptions,
    FilenameFormat,
)
from skimalens.providers.chatgpt import extract_messages, validate_chatgpt_conversation
from skimalens.providers.claude import (
    normalize_claude_messages,
    validate_claude_conversation,
)

__all__ = [
    "ConversationExporter",
    "DataKind",
    "DataMetadata",
    "ExportFormat",
    "ExportOptions",
    "FilenameFormat",
    "FormatError",
    "MessageRole",
    "NormalizedMessage",
    "ParseError",
    "ParsedData",
    "RawPayload",
    "SerializationKind",
    "SkimaLensError",
    "UnsupportedDataKindError",
    "detect",
    "estimate_record_count",
    "extract_messages",
    "load_file",
    "load_text",
    "normalize_claude_messages",
    "parse_content",
    "parse_data",
    "validate_chatgpt_conversation",
    "validate_claude_conversation",
]
