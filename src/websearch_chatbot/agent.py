from __future__ import annotations

from datetime import UTC, datetime
from typing import Callable

from loguru import logger

from websearch_chatbot.agent_config import AgentConfig
from websearch_chatbot.errors import UpstreamApiError
from websearch_chatbot.messages import Message
from websearch_chatbot.system_prompt import build_system_prompt
from websearch_chatbot.turn_engine import TurnEngine


class Agent:
    def __init__(
        self,
        config: AgentConfig,
        *,
        now: Callable[[], datetime] = lambda: datetime.now(UTC),
    ):
        self._store = config.store
        self._now = now
        self._turn_engine = TurnEngine(
            provider=config.provider,
            model=config.model,
            tools=config.tools,
            max_iterations=config.max_iterations,
            fallback_message=config.fallback_message,
            temperature=config.temperature,
            tool_choice=config.tool_choice,
        )

    async def chat(self, user_message: str, session_id: str) -> str:
        """Run one turn for ``session_id`` and return the final assistant text.

        Log records emitted during the turn carry ``session`` in their extras.
        """
        with logger.contextualize(session=session_id):
            history = self._load_history(session_id)
            logger.info(f"Turn started: history={len(history)} message(s)")

            try:
                result = await self._turn_engine.run(history=history, user_message=user_message)
            except UpstreamApiError:
                # history holds the user message and every completed tool exchange
                self._store.set(session_id, history)
                logger.error(f"Upstream failure; saved {len(history)} message(s)")
                raise

            if not result.finished:
                logger.warning(
                    f"Returning fallback after {result.iterations} iteration(s); history not saved"
                )
                return result.text

            self._store.set(session_id, history)
            logger.info(f"Turn finished: iterations={result.iterations}, history={len(history)} message(s)")
            return result.text

    def _load_history(self, session_id: str) -> list[Message]:
        history = self._store.get(session_id)
        if history is None:
            # The current time is captured once, when the session starts.
            logger.info("New session")
            return [Message.system(build_system_prompt(self._now()))]
        return history
