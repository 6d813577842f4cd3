from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional, Protocol

from whoami.services.engine import AnswerEngine
from whoami.services.errors import EngineError
from whoami.services.files import generate_filename
from whoami.services.prompts import build_narrative_message
from whoami.services.settings import settings
from whoami.services.speech import SpeechResult

logger = logging.getLogger(__name__)


class Synthesizer(Protocol):
    extension: str

    def synthesize(self, text: str) -> SpeechResult: ...


@dataclass(frozen=True)
class StoryResult:
    """Outcome of a story request.

    ``stage`` tells which step failed: ``"engine"`` means no narrative exists,
    ``"synthesis"`` and ``"write"`` mean ``narrative`` is set but no audio
    file was produced.
    """

    ok: bool
    narrative: Optional[str] = None
    audio_path: Optional[str] = None
    error: Optional[str] = None
    stage: Optional[Literal["engine", "synthesis", "write"]] = None


class StorytellerService:
    def __init__(
        self,
        engine: AnswerEngine,
        context: str,
        synthesizer: Synthesizer,
        audio_dir: str | Path | None = None,
        audio_url_prefix: str | None = None,
        subject: str | None = None,
    ) -> None:
        self._engine = engine
        self._context = context
        self._synthesizer = synthesizer
        self._audio_dir = Path(audio_dir or settings.audio_dir)
        self._audio_url_prefix = (audio_url_prefix or settings.audio_url_prefix).rstrip("/")
        self._subject = subject or settings.story_subject

    def generate_story(
        self, length: int | None = None, custom_prompt: str | None = None
    ) -> StoryResult:
        length = length or settings.story_default_length
        message = build_narrative_message(self._subject, length, custom_prompt)

        try:
            narrative = self._engine.answer(self._context, message, (), char_limit=length)
        except EngineError as exc:
            logger.error("Narrative generation failed: %s", exc)
            return StoryResult(ok=False, error=str(exc), stage="engine")

        speech = self._synthesizer.synthesize(narrative)
        if not speech.ok:
            return StoryResult(
                ok=False,
                narrative=narrative,
                error=speech.error or "Speech synthesis failed",
                stage="synthesis",
            )

        filename = generate_filename("story", self._synthesizer.extension)
        try:
            self._audio_dir.mkdir(parents=True, exist_ok=True)
            (self._audio_dir / filename).write_bytes(speech.audio)
        except OSError as exc:
            logger.error("Failed to write narrative audio %s: %s", filename, exc)
            return StoryResult(
                ok=False,
                narrative=narrative,
                error=f"Failed to save audio: {exc}",
                stage="write",
            )
        logger.info("Wrote narrative audio %s", filename)

        return StoryResult(
            ok=True,
            narrative=narrative,
            audio_path=f"{self._audio_url_prefix}/{filename}",
        )
