from __future__ import annotations

from dataclasses import dataclass

from websearch_chatbot.messages import Message


@dataclass
class SessionEntry:
    history: list[Message]
    updated_at: float
    ttl_seconds: float

    def is_expired(self, now: float) -> bool:
        return now - self.updated_at > self.ttl_seconds
