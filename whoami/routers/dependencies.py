from __future__ import annotations

from functools import lru_cache
from typing import Callable

from whoami.services.chat import ChatService
from whoami.services.conversation import SessionStore
from whoami.services.corpus import load_corpus_context
from whoami.services.engine import AnswerEngine
from whoami.services.llm import LLMClient
from whoami.services.settings import settings
from whoami.services.speech import SpeechSynthesizer
from whoami.services.storyteller import StorytellerService


@lru_cache(maxsize=1)
def get_corpus_context() -> str:
    return load_corpus_context(settings)


@lru_cache(maxsize=1)
def get_session_store() -> SessionStore:
    return SessionStore(max_sessions=settings.max_sessions)


@lru_cache(maxsize=1)
def get_answer_engine() -> AnswerEngine:
    return AnswerEngine(LLMClient())


@lru_cache(maxsize=1)
def get_chat_service() -> ChatService:
    return ChatService(
        store=get_session_store(),
        engine=get_answer_engine(),
        context=get_corpus_context(),
    )


@lru_cache(maxsize=1)
def get_storyteller_service() -> StorytellerService:
    return StorytellerService(
        engine=get_answer_engine(),
        context=get_corpus_context(),
        synthesizer=SpeechSynthesizer(),
    )


# Handlers receive the factories rather than the services, so the request
# body is validated before any client is built or the corpus is loaded.
def chat_service_provider() -> Callable[[], ChatService]:
    return get_chat_service


def storyteller_service_provider() -> Callable[[], StorytellerService]:
    return get_storyteller_service
