from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Tool(Protocol):
    @property
    def name(self) -> str: ...

    @property
    def description(self) -> str: ...

    @property
    def input_schema(self) -> dict[str, Any]: ...

    def parse_arguments(self, arguments_json: str) -> dict[str, Any]:
        """Decode and validate raw model-provided JSON. Raises InvalidToolArguments."""
        ...

    async def execute(self, tool_input: dict[str, Any]) -> str:
        """Run the tool. Raises ToolExecutionError on failure."""
        ...
