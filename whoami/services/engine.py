from __future__ import annotations

import logging
from typing import Protocol, Sequence

from whoami.models.session import Turn
from whoami.services.errors import EngineError
from whoami.services.prompts import PromptBundle, build_system_prompt
from whoami.services.settings import settings

logger = logging.getLogger(__name__)


class CompletionClient(Protocol):
    def complete(self, messages: Sequence[dict[str, str]]) -> str: ...


class AnswerEngine:
    """Answers a message using only the corpus context.

    The engine holds no session state. History is passed in by the caller and
    sent to the model unchanged; windowing it is the caller's decision.
    """

    def __init__(self, llm: CompletionClient, char_limit: int | None = None) -> None:
        self._llm = llm
        self._char_limit = char_limit or settings.response_char_limit

    def build_bundle(
        self,
        context: str,
        message: str,
        history: Sequence[Turn] = (),
        char_limit: int | None = None,
    ) -> PromptBundle:
        return PromptBundle(
            system_prompt=build_system_prompt(context, char_limit or self._char_limit),
            user_message=message,
            history=tuple(history),
        )

    def answer(
        self,
        context: str,
        message: str,
        history: Sequence[Turn] = (),
        char_limit: int | None = None,
    ) -> str:
        bundle = self.build_bundle(context, message, history, char_limit)
        logger.debug("Invoking model with %d history turns", len(bundle.history))
        reply = self._llm.complete(bundle.to_messages())
        if not isinstance(reply, str):
            raise EngineError("Language model returned a non-text reply")
        return reply
