from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from leave_console.services.console import LeavesConfigController
from leave_console.services.employee import EmployeeDirectory
from leave_console.services.leaves_api import LeavesApi

logger = logging.getLogger(__name__)


@dataclass
class _Session:
    controller: LeavesConfigController
    last_seen: float = field(default_factory=time.monotonic)


class ConsoleSessionStore:
    """Keeps one console controller per HR admin, dropping idle ones."""

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._sessions: dict[str, _Session] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def get_or_create(self, user_id: str, api: LeavesApi, directory: EmployeeDirectory) -> LeavesConfigController:
        now = self._clock()
        self._prune(now)
        session = self._sessions.get(user_id)
        if session is None:
            logger.info("Opening console session for %s", user_id)
            session = _Session(LeavesConfigController(api, directory, actor_id=user_id), last_seen=now)
            self._sessions[user_id] = session
        session.last_seen = now
        return session.controller

    def _prune(self, now: float) -> None:
        expired = [uid for uid, s in self._sessions.items() if now - s.last_seen > self._ttl]
        for uid in expired:
            logger.info("Console session for %s expired", uid)
            del self._sessions[uid]


_store: ConsoleSessionStore | None = None


def get_session_store() -> ConsoleSessionStore:
    global _store
    if _store is None:
        from leave_console.config import get_settings

        _store = ConsoleSessionStore(get_settings().console_session_ttl_seconds)
    return _store


def set_session_store(store: ConsoleSessionStore | None) -> None:
    """Override the store (for testing)."""
    global _store
    _store = store
