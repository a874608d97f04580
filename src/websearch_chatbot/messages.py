from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


@dataclass(frozen=True)
class ToolCall:
    id: str
    function_name: str
    arguments_json: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": "function",
            "function": {
                "name": self.function_name,
                "arguments": self.arguments_json,
            },
        }


@dataclass(frozen=True)
class Message:
    """One conversation turn in OpenAI chat format.

    ``tool_calls`` is only populated on assistant turns that request tool use;
    ``tool_call_id`` and ``name`` only on tool-result turns.
    """

    role: Role
    content: str | None = None
    tool_calls: tuple[ToolCall, ...] = field(default_factory=tuple)
    tool_call_id: str | None = None
    name: str | None = None

    @classmethod
    def system(cls, content: str) -> Message:
        return cls(role=Role.SYSTEM, content=content)

    @classmethod
    def user(cls, content: str) -> Message:
        return cls(role=Role.USER, content=content)

    @classmethod
    def assistant(cls, content: str | None, tool_calls: list[ToolCall] | None = None) -> Message:
        return cls(role=Role.ASSISTANT, content=content, tool_calls=tuple(tool_calls or ()))

    @classmethod
    def tool_result(cls, tool_call: ToolCall, content: str) -> Message:
        return cls(
            role=Role.TOOL,
            content=content,
            tool_call_id=tool_call.id,
            name=tool_call.function_name,
        )

    @classmethod
    def from_completion(cls, message: Any) -> Message:
        """Copy an SDK assistant message, keeping any tool calls it carries."""
        raw_calls = getattr(message, "tool_calls", None) or []
        tool_calls = [
            ToolCall(
                id=tc.id,
                function_name=tc.function.name,
                arguments_json=tc.function.arguments or "",
            )
            for tc in raw_calls
        ]
        return cls.assistant(getattr(message, "content", None), tool_calls)

    @property
    def has_tool_calls(self) -> bool:
        return bool(self.tool_calls)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"role": self.role.value, "content": self.content}
        if self.tool_calls:
            out["tool_calls"] = [tc.to_dict() for tc in self.tool_calls]
        if self.role is Role.TOOL:
            out["tool_call_id"] = self.tool_call_id
            out["name"] = self.name
        return out
