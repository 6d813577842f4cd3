from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr

Role = Literal["human", "system", "assistant"]


class Turn(BaseModel):
    """One utterance in a conversation, tagged with its speaker."""

    model_config = ConfigDict(frozen=True)

    role: Role = Field(..., description="Who produced the utterance")
    content: str = Field(..., description="Text of the utterance")


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: StrictStr = Field(
        ..., min_length=1, description="Natural language question about the person"
    )
    session_id: Optional[StrictStr] = Field(
        default=None,
        alias="sessionId",
        description="Identifier that lets clients continue a multi-turn conversation",
    )


class ChatResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    response: str
    session_id: str = Field(..., alias="sessionId")


class ChatHistoryResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    session_id: str = Field(..., alias="sessionId")
    history: List[Turn] = Field(
        default_factory=list, description="Turns recorded for the session, oldest first"
    )


class SessionDeleteResponse(BaseModel):
    success: bool = True
    deleted: bool = Field(..., description="Whether a session existed and was removed")


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
