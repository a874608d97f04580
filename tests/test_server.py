import unittest

from fastapi.testclient import TestClient

from websearch_chatbot.errors import UpstreamApiError
from websearch_chatbot.server import MISSING_FIELDS_ERROR, create_app


class _FakeAgent:
    def __init__(self, reply: str = "hi there", error: Exception | None = None) -> None:
        self._reply = reply
        self._error = error
        self.calls: list[tuple[str, str]] = []

    async def chat(self, user_message: str, session_id: str) -> str:
        self.calls.append((user_message, session_id))
        if self._error is not None:
            raise self._error
        return self._reply


class ServerTests(unittest.TestCase):
    def _client(self, agent: _FakeAgent) -> TestClient:
        return TestClient(create_app(agent))

    def test_index_is_plain_text(self) -> None:
        response = self._client(_FakeAgent()).get("/")
        self.assertEqual(200, response.status_code)
        self.assertTrue(response.headers["content-type"].startswith("text/plain"))
        self.assertEqual("Hello World!", response.text)

    def test_chat_returns_agent_reply(self) -> None:
        agent = _FakeAgent("Paris")
        response = self._client(agent).post("/chat", json={"message": "capital of France?", "threadId": "abc"})
        self.assertEqual(200, response.status_code)
        self.assertEqual({"message": "Paris"}, response.json())
        self.assertEqual([("capital of France?", "abc")], agent.calls)

    def test_numeric_thread_id_is_accepted_as_string(self) -> None:
        agent = _FakeAgent("ok")
        response = self._client(agent).post("/chat", json={"message": "hi", "threadId": 1718000000000})
        self.assertEqual(200, response.status_code)
        self.assertEqual([("hi", "1718000000000")], agent.calls)

    def test_missing_thread_id_is_400(self) -> None:
        agent = _FakeAgent()
        response = self._client(agent).post("/chat", json={"message": "hi"})
        self.assertEqual(400, response.status_code)
        self.assertEqual({"error": MISSING_FIELDS_ERROR}, response.json())
        self.assertEqual([], agent.calls)

    def test_missing_message_is_400(self) -> None:
        response = self._client(_FakeAgent()).post("/chat", json={"threadId": "abc"})
        self.assertEqual(400, response.status_code)
        self.assertEqual({"error": "message and threadId are required"}, response.json())

    def test_empty_message_is_400(self) -> None:
        response = self._client(_FakeAgent()).post("/chat", json={"message": "", "threadId": "abc"})
        self.assertEqual(400, response.status_code)

    def test_malformed_body_is_400(self) -> None:
        response = self._client(_FakeAgent()).post(
            "/chat",
            content=b"not json",
            headers={"Content-Type": "application/json"},
        )
        self.assertEqual(400, response.status_code)
        self.assertEqual({"error": MISSING_FIELDS_ERROR}, response.json())

    def test_upstream_failure_is_502(self) -> None:
        agent = _FakeAgent(error=UpstreamApiError("down"))
        response = self._client(agent).post("/chat", json={"message": "hi", "threadId": "abc"})
        self.assertEqual(502, response.status_code)
        self.assertIn("error", response.json())

    def test_cors_allows_any_origin(self) -> None:
        response = self._client(_FakeAgent()).options(
            "/chat",
            headers={"Origin": "http://localhost:5500", "Access-Control-Request-Method": "POST"},
        )
        self.assertEqual(200, response.status_code)
        self.assertIn(response.headers["access-control-allow-origin"], ("*", "http://localhost:5500"))


if __name__ == "__main__":
    unittest.main()
