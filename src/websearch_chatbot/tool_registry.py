from __future__ import annotations

from websearch_chatbot.tool import Tool
from websearch_chatbot.tools.web.tavily_search_provider import TavilySearchProvider
from websearch_chatbot.tools.web.web_search_tool import WebSearchTool


def get_all(
    tavily_api_key: str,
    *,
    search_max_results: int = 5,
    timeout: float = 30,
) -> list[Tool]:
    provider = TavilySearchProvider(
        tavily_api_key,
        max_results=search_max_results,
        timeout=timeout,
    )
    return [WebSearchTool(provider)]


def to_openai_tools(tools: list[Tool]) -> list[dict]:
    """Render tools as the OpenAI function-calling manifest."""
    return [
        {
            "type": "function",
            "function": {
                "name": t.name,
                "description": t.description,
                "parameters": t.input_schema,
            },
        }
        for t in tools
    ]
