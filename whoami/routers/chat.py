from __future__ import annotations

from typing import Callable

from fastapi import APIRouter, Depends

from whoami.models.session import (
    ChatHistoryResponse,
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    SessionDeleteResponse,
)
from whoami.routers.dependencies import chat_service_provider, get_session_store
from whoami.services.chat import ChatService
from whoami.services.conversation import SessionStore

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post(
    "",
    response_model=ChatResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def chat(
    payload: ChatRequest,
    service_factory: Callable[[], ChatService] = Depends(chat_service_provider),
) -> ChatResponse:
    result = service_factory().send_message(payload.session_id, payload.message)
    return ChatResponse(response=result.response, session_id=result.session_id)


# History and teardown only touch the session registry, so they work without
# a model credential.
@router.get("/{session_id}/history", response_model=ChatHistoryResponse)
def chat_history(
    session_id: str, store: SessionStore = Depends(get_session_store)
) -> ChatHistoryResponse:
    return ChatHistoryResponse(session_id=session_id, history=store.history(session_id))


@router.delete("/{session_id}", response_model=SessionDeleteResponse)
def delete_session(
    session_id: str, store: SessionStore = Depends(get_session_store)
) -> SessionDeleteResponse:
    return SessionDeleteResponse(deleted=store.delete(session_id))
