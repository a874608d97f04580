from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from loguru import logger

from websearch_chatbot.errors import ToolError
from websearch_chatbot.messages import Message, ToolCall
from websearch_chatbot.provider import CompletionProvider
from websearch_chatbot.tool import Tool
from websearch_chatbot.tool_registry import to_openai_tools


class TurnState(str, Enum):
    AWAITING_MODEL = "awaiting_model"
    MODEL_RESPONDED = "model_responded"
    EXECUTING_TOOLS = "executing_tools"
    FINISHED = "finished"
    BUDGET_EXHAUSTED = "budget_exhausted"


@dataclass
class TurnResult:
    text: str
    state: TurnState
    iterations: int

    @property
    def finished(self) -> bool:
        return self.state is TurnState.FINISHED


class TurnEngine:
    """Runs one user turn: model call, tool execution, repeat until a final answer."""

    def __init__(
        self,
        *,
        provider: CompletionProvider,
        model: str,
        tools: list[Tool],
        max_iterations: int,
        fallback_message: str,
        temperature: float | None = None,
        tool_choice: str = "auto",
    ) -> None:
        self._provider = provider
        self._model = model
        self._tool_map: dict[str, Tool] = {t.name: t for t in tools}
        self._converted_tools = to_openai_tools(tools)
        self._max_iterations = max_iterations
        self._fallback_message = fallback_message
        self._temperature = temperature
        self._tool_choice = tool_choice

    async def run(self, *, history: list[Message], user_message: str) -> TurnResult:
        """Extend ``history`` in place with this turn's messages.

        Provider errors propagate; ``history`` then holds every exchange that
        completed before the failure.
        """
        history.append(Message.user(user_message))
        iteration_count = 0

        while True:
            if iteration_count >= self._max_iterations:
                logger.warning(
                    f"Iteration budget of {self._max_iterations} exhausted without a final answer"
                )
                return TurnResult(self._fallback_message, TurnState.BUDGET_EXHAUSTED, iteration_count)

            iteration_count += 1
            self._log_state(TurnState.AWAITING_MODEL, iteration_count)
            message = await self._provider.complete(
                self._model,
                history,
                self._converted_tools,
                tool_choice=self._tool_choice,
                temperature=self._temperature,
            )
            history.append(message)
            self._log_state(TurnState.MODEL_RESPONDED, iteration_count)

            if not message.has_tool_calls:
                self._log_state(TurnState.FINISHED, iteration_count)
                return TurnResult(message.content or "", TurnState.FINISHED, iteration_count)

            self._log_state(TurnState.EXECUTING_TOOLS, iteration_count)
            history.extend(await self.execute_tools(message.tool_calls))

    async def execute_tools(self, tool_calls: tuple[ToolCall, ...]) -> list[Message]:
        # One at a time, in the order the model emitted them.
        results: list[Message] = []
        for tool_call in tool_calls:
            results.append(Message.tool_result(tool_call, await self._run_one(tool_call)))
        return results

    async def _run_one(self, tool_call: ToolCall) -> str:
        tool_name = tool_call.function_name
        tool = self._tool_map.get(tool_name)
        if tool is None:
            logger.warning(f"Model requested unsupported tool {tool_name!r} (call {tool_call.id})")
            return f'Error: unsupported tool "{tool_name}"'

        logger.info(f"Executing tool {tool_name} (call {tool_call.id})")
        try:
            tool_input = tool.parse_arguments(tool_call.arguments_json)
            return await tool.execute(tool_input)
        except ToolError as ex:
            logger.warning(f"Tool {tool_name} failed: {ex}")
            return f'Error executing tool "{tool_name}": {ex}'

    def _log_state(self, state: TurnState, iteration: int) -> None:
        logger.debug(f"Turn state={state.value} iteration={iteration}/{self._max_iterations}")
