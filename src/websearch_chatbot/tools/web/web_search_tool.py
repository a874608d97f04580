import json
from typing import Any

import httpx
from loguru import logger

from websearch_chatbot.errors import InvalidToolArguments, ToolExecutionError
from websearch_chatbot.tools.web.search_provider import SearchProvider

WEB_SEARCH_TOOL_NAME = "webSearch"
RESULT_SEPARATOR = "\n\n"


class WebSearchTool:
    def __init__(self, provider: SearchProvider) -> None:
        self._provider = provider

    @property
    def name(self) -> str:
        return WEB_SEARCH_TOOL_NAME

    @property
    def description(self) -> str:
        return "Search latest info from internet"

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                },
            },
            "required": ["query"],
        }

    def parse_arguments(self, arguments_json: str) -> dict[str, Any]:
        try:
            arguments = json.loads(arguments_json) if arguments_json else None
        except json.JSONDecodeError as ex:
            raise InvalidToolArguments(self.name, f"not valid JSON ({ex.msg})", arguments_json) from ex

        if not isinstance(arguments, dict):
            raise InvalidToolArguments(self.name, "expected a JSON object", arguments_json)

        query = arguments.get("query")
        if not isinstance(query, str):
            raise InvalidToolArguments(self.name, "'query' must be a string", arguments_json)
        if not query.strip():
            raise InvalidToolArguments(self.name, "'query' must not be empty", arguments_json)

        return {"query": query.strip()}

    async def execute(self, tool_input: dict[str, Any]) -> str:
        query: str = tool_input["query"]

        try:
            results = await self._provider.search(query)
        except httpx.TimeoutException as ex:
            raise ToolExecutionError(self.name, "search request timed out") from ex
        except httpx.HTTPStatusError as ex:
            raise ToolExecutionError(self.name, str(ex)) from ex
        except httpx.HTTPError as ex:
            raise ToolExecutionError(self.name, f"{type(ex).__name__}: {ex}") from ex

        logger.debug(f"{self._provider.provider_name} returned {len(results)} result(s) for {query!r}")
        return RESULT_SEPARATOR.join(r.content for r in results)
