from skimalens.providers.chatgpt.flattener import (
    extract_messages,
    is_chatgpt_conversation,
    is_chatgpt_conversations,
    sort_by_create_time,
    validate_chatgpt_conversation,
)
from skimalens.providers.chatgpt.schemas import ChatGPTConversation

__all__ = [
    "ChatGPTConversation",
    "extract_messages",
    "is_chatgpt_conversation",
    "is_chatgpt_conversations",
    "sort_by_create_time",
    "validate_chatgpt_conversation",
]
