"""Schema detection: decide which :class:`DataKind` a parsed value is.

Detection is advisory and never raises. Rules are evaluated in order and
the first match wins; structural signatures overlap, so the specific
checks come before the generic ones, and filename hints are only consulted
once no structural rule matched.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from skimalens.core.types import DataKind
from skimalens.providers.chatgpt.flattener import (
    is_chatgpt_conversation,
    is_chatgpt_conversations,
)
from skimalens.providers.claude.normalizer import (
    is_claude_conversation,
    is_claude_conversations,
    looks_like_claude_conversation,
)

logger = logging.getLogger(__name__)

DetectionRule = tuple[str, Callable[[Any, str], bool], DataKind]


def _not_an_object(data: Any, filename: str) -> bool:
    return not isinstance(data, Mapping | list)


def _structural(predicate: Callable[[Any], bool]) -> Callable[[Any, str], bool]:
    def check(data: Any, filename: str) -> bool:
        return predicate(data)

    return check


def _chatgpt_filename_hint(data: Any, filename: str) -> bool:
    name = filename.lower()
    return "chatgpt" in name or ("conversation" in name and "claude" not in name)


def _cloudwatch_filename_hint(data: Any, filename: str) -> bool:
    name = filename.lower()
    return "cloudwatch" in name or "log" in name


DETECTION_RULES: tuple[DetectionRule, ...] = (
    ("not-an-object", _not_an_object, DataKind.UNKNOWN),
    ("claude-strict", _structural(is_claude_conversation), DataKind.CLAUDE_CONVERSATION),
    ("claude-array", _structural(is_claude_conversations), DataKind.CLAUDE_CONVERSATION),
    (
        "claude-loose",
        _structural(looks_like_claude_conversation),
        DataKind.CLAUDE_CONVERSATION,
    ),
    (
        "chatgpt-strict",
        _structural(is_chatgpt_conversation),
        DataKind.CHATGPT_CONVERSATION,
    ),
    (
        "chatgpt-array",
        _structural(is_chatgpt_conversations),
        DataKind.CHATGPT_CONVERSATION,
    ),
    ("chatgpt-filename", _chatgpt_filename_hint, DataKind.CHATGPT_CONVERSATION),
    ("cloudwatch-filename", _cloudwatch_filename_hint, DataKind.CLOUDWATCH_LOGS),
)


def detect(data: Any, filename: str = "") -> DataKind:
    """Classify *data*, falling back to ``generic-json``."""
    for name, matches, kind in DETECTION_RULES:
        try:
            matched = matches(data, filename or "")
        except Exception:
            # A predicate must never make detection fail.
            logger.warning("Detection rule %s raised; treating as no match", name)
            continue
        if matched:
            logger.debug("Detected %s for %r via rule %s", kind, filename, name)
            return kind

    logger.debug("No detection rule matched %r; using %s", filename, DataKind.GENERIC_JSON)
    return DataKind.GENERIC_JSON
