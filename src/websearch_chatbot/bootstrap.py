from __future__ import annotations

from dataclasses import dataclass

from websearch_chatbot.agent import Agent
from websearch_chatbot.agent_config import AgentConfig
from websearch_chatbot.app_config import AppConfig, RuntimeEnv
from websearch_chatbot.logging_config import setup_logging
from websearch_chatbot.memory import InMemoryConversationStore
from websearch_chatbot.provider import create_provider
from websearch_chatbot.tool import Tool
from websearch_chatbot.tool_registry import get_all


@dataclass
class AppRuntime:
    agent: Agent
    store: InMemoryConversationStore
    tools: list[Tool]
    log_descriptions: list[str]


def bootstrap_runtime(app: AppConfig, env: RuntimeEnv) -> AppRuntime:
    log_descriptions = setup_logging(level=app.log_level, consumers=app.log_consumers)

    tools = get_all(
        env.tavily_api_key,
        search_max_results=app.search_max_results,
        timeout=app.request_timeout_seconds,
    )
    provider = create_provider(
        app.provider_name,
        env.provider_api_key,
        timeout=app.request_timeout_seconds,
        max_retries=app.max_retries,
    )
    store = InMemoryConversationStore(ttl_seconds=app.session_ttl_seconds)

    agent = Agent(
        AgentConfig(
            provider=provider,
            model=app.model,
            temperature=app.temperature,
            tools=tools,
            store=store,
            max_iterations=app.max_iterations,
        )
    )

    return AppRuntime(
        agent=agent,
        store=store,
        tools=tools,
        log_descriptions=log_descriptions,
    )
