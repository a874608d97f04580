from typing import Protocol, runtime_checkable

from websearch_chatbot.messages import Message

GROQ_BASE_URL = "https://api.groq.com/openai/v1"


@runtime_checkable
class CompletionProvider(Protocol):
    async def complete(
        self,
        model: str,
        messages: list[Message],
        tools: list[dict],
        *,
        tool_choice: str = "auto",
        temperature: float | None = None,
    ) -> Message:
        """Submit the conversation and return the first choice's assistant message.

        Raises UpstreamApiError when the remote API fails.
        """
        ...


def create_provider(
    provider_name: str,
    api_key: str,
    *,
    timeout: float = 30,
    max_retries: int = 3,
) -> CompletionProvider:
    """Factory: create a CompletionProvider by name."""
    from websearch_chatbot.providers.openai_provider import OpenAIProvider

    name = provider_name.strip().lower()
    if name == "groq":
        return OpenAIProvider(api_key, base_url=GROQ_BASE_URL, timeout=timeout, max_retries=max_retries)
    if name == "openai":
        return OpenAIProvider(api_key, timeout=timeout, max_retries=max_retries)
    raise ValueError(f"Unknown provider: {provider_name!r}. Supported: 'groq', 'openai'")
