from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from whoami.models.session import Turn
from whoami.services.conversation import SessionStore
from whoami.services.engine import AnswerEngine
from whoami.services.settings import settings

logger = logging.getLogger(__name__)


@dataclass
class ChatResult:
    response: str
    session_id: str
    history: List[Turn] = field(default_factory=list)


class ChatService:
    def __init__(
        self,
        store: SessionStore,
        engine: AnswerEngine,
        context: str,
        max_history_messages: int | None = None,
    ) -> None:
        self._store = store
        self._engine = engine
        self._context = context
        self._max_history = max_history_messages or settings.max_history_messages

    def send_message(self, session_id: str | None, message: str) -> ChatResult:
        session_id = session_id or self._store.generate_id()
        session = self._store.get_or_create(session_id)

        # One request per session at a time, so every reply directly follows
        # the user turn that triggered it.
        with session.lock:
            snapshot = self._store.history(session_id)
            self._store.append(session_id, Turn(role="human", content=message))

            # A failed call leaves the human turn recorded without a reply.
            response = self._engine.answer(
                self._context, message, self._window(snapshot)
            )

            self._store.append(session_id, Turn(role="assistant", content=response))
            history = self._store.history(session_id)

        return ChatResult(response=response, session_id=session_id, history=history)

    def _window(self, turns: List[Turn]) -> List[Turn]:
        if len(turns) <= self._max_history:
            return turns
        return turns[-self._max_history :]
