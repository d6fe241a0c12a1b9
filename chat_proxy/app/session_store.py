"""Bounded in-memory store for per-client chat histories."""
from __future__ import annotations

import asyncio
import logging
import time
from collections import OrderedDict
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from threading import RLock
from typing import AsyncIterator, Callable, List, Sequence

from .schemas import Turn

logger = logging.getLogger(__name__)


@dataclass
class _Session:
    history: List[Turn] = field(default_factory=list)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    last_seen: float = 0.0


class SessionStore:
    """Thread-safe in-memory store for chat histories.

    Entries are created lazily and evicted least-recently-used once
    ``max_sessions`` is exceeded, or after ``ttl_seconds`` of inactivity.
    Entries whose lock is held by an in-flight exchange are never evicted.

    ``get`` followed by ``replace`` is only atomic per client when the caller
    holds ``lock(client_id)`` across both calls.
    """

    def __init__(
        self,
        max_sessions: int = 1000,
        ttl_seconds: float = 0.0,
        max_history_messages: int = 0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._sessions: "OrderedDict[str, _Session]" = OrderedDict()
        self._lock = RLock()
        self._max_sessions = max_sessions
        self._ttl_seconds = ttl_seconds
        self._max_history_messages = max_history_messages
        self._clock = clock

    def get(self, client_id: str) -> List[Turn]:
        with self._lock:
            return list(self._touch(client_id).history)

    def replace(self, client_id: str, history: Sequence[Turn]) -> None:
        with self._lock:
            session = self._touch(client_id)
            session.history = self._bounded(history)

    def clear(self, client_id: str) -> None:
        with self._lock:
            self._sessions.pop(client_id, None)

    @asynccontextmanager
    async def lock(self, client_id: str) -> AsyncIterator[None]:
        """Serialize read-modify-write sequences for one client."""
        with self._lock:
            session_lock = self._touch(client_id).lock
        async with session_lock:
            yield

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, client_id: object) -> bool:
        with self._lock:
            return client_id in self._sessions

    def _touch(self, client_id: str) -> _Session:
        now = self._clock()
        session = self._sessions.get(client_id)
        if session is None:
            session = _Session()
            self._sessions[client_id] = session
        session.last_seen = now
        self._sessions.move_to_end(client_id)
        self._evict(now, keep=client_id)
        return session

    def _evict(self, now: float, keep: str) -> None:
        if self._ttl_seconds > 0:
            expired = [
                client_id
                for client_id, session in self._sessions.items()
                if now - session.last_seen > self._ttl_seconds and not session.lock.locked()
            ]
            for client_id in expired:
                del self._sessions[client_id]
            if expired:
                logger.debug("Dropped %d idle sessions", len(expired))

        if self._max_sessions <= 0:
            return
        # Oldest first; the entry just touched sits at the end.
        for client_id in list(self._sessions):
            if len(self._sessions) <= self._max_sessions:
                break
            if client_id == keep or self._sessions[client_id].lock.locked():
                continue
            del self._sessions[client_id]
            logger.debug("Evicted least recently used session %s", client_id)

    def _bounded(self, history: Sequence[Turn]) -> List[Turn]:
        turns = list(history)
        if self._max_history_messages > 0:
            turns = turns[-self._max_history_messages :]
            # Never start on the reply half of a cut pair.
            while turns and turns[0].role == "assistant":
                turns = turns[1:]
        return turns
