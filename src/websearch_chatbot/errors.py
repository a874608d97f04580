class ChatbotError(Exception):
    """Base class for errors raised by the chatbot backend."""


class MissingField(ChatbotError):
    def __init__(self, fields: list[str]):
        self.fields = fields
        super().__init__(f"Missing required field(s): {', '.join(fields)}")


class ToolError(ChatbotError):
    """A tool call could not be answered with a result."""


class ToolExecutionError(ToolError):
    def __init__(self, tool_name: str, reason: str):
        self.tool_name = tool_name
        self.reason = reason
        super().__init__(f"{tool_name} failed: {reason}")


class InvalidToolArguments(ToolError):
    def __init__(self, tool_name: str, reason: str, raw_arguments: str = ""):
        self.tool_name = tool_name
        self.reason = reason
        self.raw_arguments = raw_arguments
        super().__init__(f"Invalid arguments for {tool_name}: {reason}")


class UpstreamApiError(ChatbotError):
    """The remote completion API failed (after any retries)."""
