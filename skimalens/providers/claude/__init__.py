from skimalens.providers.claude.normalizer import (
    is_claude_conversation,
    is_claude_conversations,
    looks_like_claude_conversation,
    normalize_claude_messages,
    sort_claude_messages,
    validate_claude_conversation,
)
from skimalens.providers.claude.schemas import ClaudeConversation, ClaudeMessage

__all__ = [
    "ClaudeConversation",
    "ClaudeMessage",
    "is_claude_conversation",
    "is_claude_conversations",
    "looks_like_claude_conversation",
    "normalize_claude_messages",
    "sort_claude_messages",
    "validate_claude_conversation",
]
