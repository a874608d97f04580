from __future__ import annotations

import threading
import time
from typing import Callable, Protocol, runtime_checkable

from loguru import logger

from websearch_chatbot.memory.models import SessionEntry
from websearch_chatbot.messages import Message

DEFAULT_TTL_SECONDS = 24 * 60 * 60


@runtime_checkable
class ConversationStore(Protocol):
    def get(self, session_id: str) -> list[Message] | None:
        """Return the session's history, or None when the session is unknown or expired."""
        ...

    def set(self, session_id: str, history: list[Message]) -> None: ...


class InMemoryConversationStore:
    """Process-local session cache; entries expire ``ttl_seconds`` after their last write."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, SessionEntry] = {}
        self._lock = threading.Lock()

    @property
    def ttl_seconds(self) -> float:
        return self._ttl_seconds

    def get(self, session_id: str) -> list[Message] | None:
        with self._lock:
            entry = self._entries.get(session_id)
            if entry is None:
                return None
            if entry.is_expired(self._clock()):
                del self._entries[session_id]
                logger.debug(f"Session {session_id} expired")
                return None
            return list(entry.history)

    def set(self, session_id: str, history: list[Message]) -> None:
        with self._lock:
            now = self._clock()
            self._entries[session_id] = SessionEntry(
                history=list(history),
                updated_at=now,
                ttl_seconds=self._ttl_seconds,
            )
            self._purge_expired_locked(now)

    def delete(self, session_id: str) -> bool:
        with self._lock:
            return self._entries.pop(session_id, None) is not None

    def purge_expired(self) -> int:
        with self._lock:
            return self._purge_expired_locked(self._clock())

    def _purge_expired_locked(self, now: float) -> int:
        expired = [sid for sid, entry in self._entries.items() if entry.is_expired(now)]
        for sid in expired:
            del self._entries[sid]
        if expired:
            logger.debug(f"Evicted {len(expired)} expired session(s)")
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
