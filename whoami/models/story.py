from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr


class StoryRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    length: StrictInt = Field(
        ..., ge=100, description="Upper bound on the narrative length, in characters"
    )
    custom_prompt: Optional[StrictStr] = Field(
        default=None,
        alias="customPrompt",
        description="Extra instructions appended to the narrative request",
    )


class StoryResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    narrative: str
    audio_path: str = Field(..., alias="audioPath")
