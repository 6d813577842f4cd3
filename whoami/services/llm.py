from __future__ import annotations

import logging
from typing import Sequence

from openai import OpenAI, OpenAIError

from whoami.services.errors import ConfigurationError, EngineError
from whoami.services.settings import settings

logger = logging.getLogger(__name__)


class LLMClient:
    """Wrapper around an OpenAI-compatible chat completion endpoint."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        temperature: float | None = None,
    ) -> None:
        api_key = api_key or settings.openai_api_key
        if not api_key:
            raise ConfigurationError(
                "OPENAI_API_KEY is not configured. Set it in the environment before starting the service."
            )
        self._client = OpenAI(api_key=api_key, base_url=base_url or settings.openai_base_url)
        self._model = model or settings.openai_model
        self._temperature = settings.temperature if temperature is None else temperature

    def complete(self, messages: Sequence[dict[str, str]]) -> str:
        try:
            response = self._client.chat.completions.create(
                model=self._model,
                messages=list(messages),
                temperature=self._temperature,
            )
        except OpenAIError as exc:
            logger.error("Model call to %s failed: %s", self._model, exc)
            raise EngineError(f"Language model request failed: {exc}") from exc

        if not response.choices:
            raise EngineError("Language model returned no choices")
        content = response.choices[0].message.content
        if not isinstance(content, str) or not content.strip():
            raise EngineError("Language model returned an empty reply")
        return content
