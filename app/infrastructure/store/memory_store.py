from __future__ import annotations

import threading
import time
from collections import OrderedDict
from contextlib import contextmanager
from typing import Callable, Iterator

from app.application.ports.session_store import SessionStorePort
from app.domain.entities.session import Session


class _KeyLock:
    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.users = 0


class MemorySessionStore(SessionStorePort):
    """
    Process-local sessions.

    Sessions idle for longer than `idle_timeout_seconds` read back as fresh
    idle sessions and are purged from memory at most once per
    `purge_interval_seconds`. Per-user locks are reference counted and
    dropped as soon as nobody holds or waits for them.
    """

    def __init__(
        self,
        idle_timeout_seconds: float = 86400,
        processed_limit: int = 10_000,
        purge_interval_seconds: float = 300,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._sessions: dict[str, Session] = {}
        self._processed: OrderedDict[str, None] = OrderedDict()
        self._locks: dict[str, _KeyLock] = {}
        self._lock_lock = threading.Lock()  # guards the three dicts above
        self._idle_timeout = idle_timeout_seconds
        self._processed_limit = processed_limit
        self._purge_interval = purge_interval_seconds
        self._clock = clock
        self._last_purge = clock()

    def get(self, user_id: str) -> Session:
        with self._lock_lock:
            session = self._sessions.get(user_id)
        if session is None or self._is_expired(session, self._clock()):
            return Session()
        return session

    def set(self, user_id: str, session: Session) -> None:
        now = self._clock()
        with self._lock_lock:
            self._sessions[user_id] = session
            if now - self._last_purge >= self._purge_interval:
                self._purge_expired(now)

    @contextmanager
    def lock(self, user_id: str) -> Iterator[None]:
        with self._lock_lock:
            entry = self._locks.get(user_id)
            if entry is None:
                entry = self._locks[user_id] = _KeyLock()
            entry.users += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._lock_lock:
                entry.users -= 1
                if entry.users == 0:
                    del self._locks[user_id]

    def mark_processed(self, message_id: str) -> bool:
        with self._lock_lock:
            if message_id in self._processed:
                return False
            self._processed[message_id] = None
            while len(self._processed) > self._processed_limit:
                self._processed.popitem(last=False)
            return True

    def __len__(self) -> int:
        with self._lock_lock:
            return len(self._sessions)

    def _is_expired(self, session: Session, now: float) -> bool:
        if session.last_seen_at is None:
            return False
        return now - session.last_seen_at > self._idle_timeout

    def _purge_expired(self, now: float) -> None:
        expired = [uid for uid, s in self._sessions.items() if self._is_expired(s, now)]
        for uid in expired:
            del self._sessions[uid]
        self._last_purge = now
