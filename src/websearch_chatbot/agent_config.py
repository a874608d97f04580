from dataclasses import dataclass, field

from websearch_chatbot.memory import ConversationStore, InMemoryConversationStore
from websearch_chatbot.provider import CompletionProvider
from websearch_chatbot.tool import Tool

DEFAULT_MODEL = "meta-llama/llama-4-scout-17b-16e-instruct"
MAX_ITERATIONS = 10
FALLBACK_MESSAGE = "Sorry, I'm having trouble finding the answer right now. please try again later."


@dataclass
class AgentConfig:
    provider: CompletionProvider
    model: str = DEFAULT_MODEL
    temperature: float | None = None
    tools: list[Tool] = field(default_factory=list)
    store: ConversationStore = field(default_factory=InMemoryConversationStore)
    max_iterations: int = MAX_ITERATIONS
    fallback_message: str = FALLBACK_MESSAGE
    tool_choice: str = "auto"
