from __future__ import annotations

import logging
from dataclasses import dataclass

from openai import OpenAI, OpenAIError

from whoami.services.errors import ConfigurationError, SynthesisError
from whoami.services.settings import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SpeechResult:
    ok: bool
    audio: bytes = b""
    error: str | None = None


class SpeechSynthesizer:
    """Turns narrative text into audio bytes through the OpenAI speech endpoint."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        voice: str | None = None,
        response_format: str | None = None,
        speed: float | None = None,
        base_url: str | None = None,
    ) -> None:
        api_key = api_key or settings.tts_api_key
        if not api_key:
            raise ConfigurationError(
                "TTS_API_KEY is not configured. Set it (or OPENAI_API_KEY) before generating audio."
            )
        self._client = OpenAI(api_key=api_key, base_url=base_url or settings.tts_base_url)
        self._model = model or settings.tts_model
        self._voice = voice or settings.tts_voice
        self._format = response_format or settings.tts_format
        self._speed = settings.tts_speed if speed is None else speed

    @property
    def extension(self) -> str:
        return self._format

    def synthesize(self, text: str) -> SpeechResult:
        try:
            audio = self._request(text)
        except SynthesisError as exc:
            logger.error("Speech synthesis failed: %s", exc)
            return SpeechResult(ok=False, error=str(exc))
        return SpeechResult(ok=True, audio=audio)

    def _request(self, text: str) -> bytes:
        try:
            response = self._client.audio.speech.create(
                model=self._model,
                voice=self._voice,
                input=text,
                response_format=self._format,
                speed=self._speed,
            )
        except OpenAIError as exc:
            raise SynthesisError(str(exc) or "Unknown Error") from exc
        audio = response.content
        if not audio:
            raise SynthesisError("Speech endpoint returned no audio")
        return audio
