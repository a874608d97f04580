from websearch_chatbot.memory.conversation_store import (
    DEFAULT_TTL_SECONDS,
    ConversationStore,
    InMemoryConversationStore,
)
from websearch_chatbot.memory.models import SessionEntry

__all__ = [
    "DEFAULT_TTL_SECONDS",
    "ConversationStore",
    "InMemoryConversationStore",
    "SessionEntry",
]
