from __future__ import annotations

from typing import Callable

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from whoami.models.session import ErrorResponse
from whoami.models.story import StoryResponse, StoryRequest
from whoami.routers.dependencies import storyteller_service_provider
from whoami.services.storyteller import StorytellerService

router = APIRouter(prefix="/story", tags=["story"])


@router.post(
    "",
    response_model=StoryResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def generate_story(
    payload: StoryRequest,
    service_factory: Callable[[], StorytellerService] = Depends(
        storyteller_service_provider
    ),
):
    result = service_factory().generate_story(payload.length, payload.custom_prompt)
    if not result.ok:
        content = {"success": False, "error": result.error, "stage": result.stage}
        if result.narrative is not None:
            content["narrative"] = result.narrative
        return JSONResponse(status_code=500, content=content)
    return StoryResponse(narrative=result.narrative, audio_path=result.audio_path)
