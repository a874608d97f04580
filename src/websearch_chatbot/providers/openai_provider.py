import openai
from loguru import logger
from tenacity import AsyncRetrying

from websearch_chatbot.errors import UpstreamApiError
from websearch_chatbot.messages import Message
from websearch_chatbot.providers.common import default_retry_kwargs

_RETRYABLE_ERRORS = (
    openai.RateLimitError,
    openai.APIConnectionError,
    openai.APITimeoutError,
)


class OpenAIProvider:
    """Chat-completion client for any OpenAI-compatible endpoint (OpenAI, Groq)."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str | None = None,
        timeout: float = 30,
        max_retries: int = 3,
        min_retry_wait: float = 1,
    ):
        # The SDK's own retry loop is disabled; retries go through tenacity so they are logged.
        self._client = openai.AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
        )
        self._retry_kwargs = default_retry_kwargs(
            _RETRYABLE_ERRORS,
            max_attempts=max_retries,
            min_wait=min_retry_wait,
        )

    async def complete(
        self,
        model: str,
        messages: list[Message],
        tools: list[dict],
        *,
        tool_choice: str = "auto",
        temperature: float | None = None,
    ) -> Message:
        kwargs: dict = dict(
            model=model,
            messages=[m.to_dict() for m in messages],
        )
        if tools:
            kwargs["tools"] = tools
            kwargs["tool_choice"] = tool_choice
        if temperature is not None:
            kwargs["temperature"] = temperature

        logger.debug(f"API request: model={model}, messages={len(messages)}, tools={len(tools)}")
        try:
            async for attempt in AsyncRetrying(**self._retry_kwargs):
                with attempt:
                    response = await self._client.chat.completions.create(**kwargs)
        except openai.APIError as ex:
            raise UpstreamApiError(f"Completion request failed: {type(ex).__name__}: {ex}") from ex

        if not response.choices:
            raise UpstreamApiError("Completion response contained no choices")

        choice = response.choices[0]
        message = Message.from_completion(choice.message)
        logger.debug(
            f"API response: finish_reason={choice.finish_reason}, "
            f"text_len={len(message.content or '')}, tool_calls={len(message.tool_calls)}"
        )
        return message
