import asyncio
import json
import unittest

from tests.fakes import FakeSearchProvider, ScriptedProvider, search_call, timeout_error
from websearch_chatbot.agent_config import FALLBACK_MESSAGE, MAX_ITERATIONS
from websearch_chatbot.messages import Message, Role, ToolCall
from websearch_chatbot.tools.web.web_search_tool import WebSearchTool
from websearch_chatbot.turn_engine import TurnEngine, TurnState


def _assert_tool_results_answer_preceding_assistant(test: unittest.TestCase, history: list[Message]) -> None:
    last_assistant: Message | None = None
    for message in history:
        if message.role is Role.ASSISTANT:
            last_assistant = message
        elif message.role is Role.TOOL:
            test.assertIsNotNone(last_assistant)
            test.assertIn(message.tool_call_id, [tc.id for tc in last_assistant.tool_calls])
        else:
            last_assistant = None


class TurnEngineTests(unittest.TestCase):
    def _make_engine(self, provider: ScriptedProvider, search: FakeSearchProvider | None = None) -> TurnEngine:
        return TurnEngine(
            provider=provider,
            model="test-model",
            tools=[WebSearchTool(search or FakeSearchProvider(["sunny"]))],
            max_iterations=MAX_ITERATIONS,
            fallback_message=FALLBACK_MESSAGE,
        )

    def _run(self, engine: TurnEngine, history: list[Message], text: str):
        return asyncio.run(engine.run(history=history, user_message=text))

    def test_direct_answer_uses_one_completion_call(self) -> None:
        provider = ScriptedProvider([Message.assistant("The capital of France is Paris.")])
        history = [Message.system("sys")]

        result = self._run(self._make_engine(provider), history, "What is the capital of France?")

        self.assertEqual("The capital of France is Paris.", result.text)
        self.assertEqual(TurnState.FINISHED, result.state)
        self.assertTrue(result.finished)
        self.assertEqual(1, provider.call_count)
        self.assertEqual([Role.SYSTEM, Role.USER, Role.ASSISTANT], [m.role for m in history])

    def test_request_carries_manifest_and_auto_choice(self) -> None:
        provider = ScriptedProvider([Message.assistant("hi")])
        self._run(self._make_engine(provider), [Message.system("sys")], "hello")

        request = provider.requests[0]
        self.assertEqual("test-model", request["model"])
        self.assertEqual("auto", request["tool_choice"])
        function = request["tools"][0]["function"]
        self.assertEqual("webSearch", function["name"])
        self.assertEqual("Search latest info from internet", function["description"])
        self.assertEqual(["query"], function["parameters"]["required"])

    def test_search_then_answer(self) -> None:
        provider = ScriptedProvider([
            Message.assistant(None, [search_call("call_1", "weather in Mumbai")]),
            Message.assistant("It is sunny in Mumbai."),
        ])
        search = FakeSearchProvider(["sunny", "32C"])
        history = [Message.system("sys")]

        result = self._run(self._make_engine(provider, search), history, "weather in Mumbai")

        self.assertEqual("It is sunny in Mumbai.", result.text)
        self.assertEqual(2, provider.call_count)
        self.assertEqual(["weather in Mumbai"], search.queries)
        self.assertEqual(
            [Role.SYSTEM, Role.USER, Role.ASSISTANT, Role.TOOL, Role.ASSISTANT],
            [m.role for m in history],
        )
        tool_message = history[3]
        self.assertEqual("call_1", tool_message.tool_call_id)
        self.assertEqual("webSearch", tool_message.name)
        self.assertEqual("sunny\n\n32C", tool_message.content)
        # second request sees the tool result
        self.assertEqual(4, len(provider.requests[1]["messages"]))

    def test_multiple_tool_calls_answered_in_order(self) -> None:
        provider = ScriptedProvider([
            Message.assistant(None, [search_call("a", "one"), search_call("b", "two")]),
            Message.assistant("done"),
        ])
        search = FakeSearchProvider(["r"])
        history = [Message.system("sys")]

        self._run(self._make_engine(provider, search), history, "two things")

        self.assertEqual(["one", "two"], search.queries)
        self.assertEqual(["a", "b"], [m.tool_call_id for m in history if m.role is Role.TOOL])
        _assert_tool_results_answer_preceding_assistant(self, history)

    def test_tool_results_always_match_preceding_assistant(self) -> None:
        provider = ScriptedProvider([
            Message.assistant(None, [search_call("c1", "x")]),
            Message.assistant(None, [search_call("c2", "y"), search_call("c3", "z")]),
            Message.assistant(None, [ToolCall(id="c4", function_name="calculator", arguments_json="{}")]),
            Message.assistant("final"),
        ])
        history = [Message.system("sys")]

        self._run(self._make_engine(provider), history, "go")

        _assert_tool_results_answer_preceding_assistant(self, history)
        self.assertEqual(4, len([m for m in history if m.role is Role.TOOL]))

    def test_endless_tool_calls_hit_iteration_cap(self) -> None:
        provider = ScriptedProvider(repeat=Message.assistant(None, [search_call("loop", "again")]))
        history = [Message.system("sys")]

        result = self._run(self._make_engine(provider), history, "never ending")

        self.assertEqual(FALLBACK_MESSAGE, result.text)
        self.assertEqual(TurnState.BUDGET_EXHAUSTED, result.state)
        self.assertFalse(result.finished)
        self.assertEqual(10, provider.call_count)
        self.assertEqual(10, result.iterations)

    def test_custom_iteration_cap(self) -> None:
        provider = ScriptedProvider(repeat=Message.assistant(None, [search_call("loop", "again")]))
        engine = TurnEngine(
            provider=provider,
            model="m",
            tools=[WebSearchTool(FakeSearchProvider())],
            max_iterations=3,
            fallback_message="give up",
        )
        result = asyncio.run(engine.run(history=[Message.system("sys")], user_message="x"))
        self.assertEqual("give up", result.text)
        self.assertEqual(3, provider.call_count)

    def test_unknown_tool_gets_error_result(self) -> None:
        provider = ScriptedProvider([
            Message.assistant(None, [ToolCall(id="u1", function_name="calculator", arguments_json="{}")]),
            Message.assistant("sorry"),
        ])
        history = [Message.system("sys")]

        self._run(self._make_engine(provider), history, "2+2")

        tool_message = history[3]
        self.assertEqual(Role.TOOL, tool_message.role)
        self.assertEqual("u1", tool_message.tool_call_id)
        self.assertEqual('Error: unsupported tool "calculator"', tool_message.content)

    def test_search_failure_becomes_error_result_and_turn_continues(self) -> None:
        provider = ScriptedProvider([
            Message.assistant(None, [search_call("c1", "news")]),
            Message.assistant("I could not search right now."),
        ])
        search = FakeSearchProvider(error=timeout_error())
        history = [Message.system("sys")]

        result = self._run(self._make_engine(provider, search), history, "latest news")

        self.assertTrue(result.finished)
        self.assertTrue(history[3].content.startswith('Error executing tool "webSearch"'))
        self.assertIn("timed out", history[3].content)

    def test_invalid_arguments_become_error_result(self) -> None:
        provider = ScriptedProvider([
            Message.assistant(None, [ToolCall(id="c1", function_name="webSearch", arguments_json="not json")]),
            Message.assistant("ok"),
        ])
        search = FakeSearchProvider(["unused"])
        history = [Message.system("sys")]

        self._run(self._make_engine(provider, search), history, "q")

        self.assertEqual([], search.queries)
        self.assertIn("Invalid arguments for webSearch", history[3].content)

    def test_null_final_content_is_empty_string(self) -> None:
        provider = ScriptedProvider([Message.assistant(None)])
        result = self._run(self._make_engine(provider), [Message.system("sys")], "hi")
        self.assertEqual("", result.text)

    def test_assistant_message_is_appended_verbatim(self) -> None:
        reply = Message.assistant("thinking", [search_call("c1", "x")])
        provider = ScriptedProvider([reply, Message.assistant("done")])
        history = [Message.system("sys")]

        self._run(self._make_engine(provider), history, "q")

        self.assertIs(reply, history[2])
        self.assertEqual(json.dumps({"query": "x"}), history[2].tool_calls[0].arguments_json)


if __name__ == "__main__":
    unittest.main()
