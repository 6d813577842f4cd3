from __future__ import annotations

import logging
import threading
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List

from whoami.models.session import Turn

logger = logging.getLogger(__name__)


@dataclass
class Session:
    id: str
    turns: List[Turn] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)


class SessionStore:
    """Ephemeral in-memory registry of chat sessions.

    ``max_sessions`` bounds the registry; when full, the oldest session is
    dropped to make room for a new one.
    """

    def __init__(self, max_sessions: int | None = None) -> None:
        self._sessions: "OrderedDict[str, Session]" = OrderedDict()
        self._lock = threading.Lock()
        self._max_sessions = max_sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._sessions

    def generate_id(self) -> str:
        return str(uuid.uuid4())

    def get_or_create(self, session_id: str) -> Session:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                session = Session(id=session_id)
                self._sessions[session_id] = session
                logger.info("Created chat session %s", session_id)
                self._evict()
            return session

    def append(self, session_id: str, turn: Turn) -> None:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is not None:
                session.turns.append(turn)

    def delete(self, session_id: str) -> bool:
        with self._lock:
            removed = self._sessions.pop(session_id, None) is not None
        if removed:
            logger.info("Deleted chat session %s", session_id)
        return removed

    def history(self, session_id: str) -> List[Turn]:
        with self._lock:
            session = self._sessions.get(session_id)
            return list(session.turns) if session else []

    def _evict(self) -> None:
        if self._max_sessions is None:
            return
        while len(self._sessions) > self._max_sessions:
            evicted, _ = self._sessions.popitem(last=False)
            logger.info("Evicted chat session %s", evicted)
