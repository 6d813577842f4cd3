from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _split_list(raw: str | None) -> List[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def _positive_int(raw: str | None, default: int | None) -> int | None:
    if not raw:
        return default
    try:
        parsed = int(raw)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _float(raw: str | None, default: float) -> float:
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass
class Settings:
    openai_api_key: str | None = os.environ.get("OPENAI_API_KEY")
    openai_base_url: str | None = os.environ.get("OPENAI_BASE_URL") or None
    openai_model: str = os.environ.get("OPENAI_MODEL", "gpt-4o-mini")
    temperature: float = 0.7
    tts_api_key: str | None = os.environ.get("TTS_API_KEY")
    tts_base_url: str | None = os.environ.get("TTS_BASE_URL") or None
    tts_model: str = os.environ.get("TTS_MODEL", "gpt-4o-mini-tts")
    tts_voice: str = os.environ.get("TTS_VOICE", "alloy")
    tts_format: str = os.environ.get("TTS_FORMAT", "wav")
    tts_speed: float = 1.15
    corpus_dir: str = os.environ.get("CORPUS_DIR", "public/portfolio")
    corpus_extensions: List[str] = field(default_factory=lambda: [".txt", ".md"])
    corpus_urls: List[str] = field(default_factory=list)
    corpus_timeout: int = 10
    response_char_limit: int = 250
    max_history_messages: int = 20
    max_sessions: int | None = None
    audio_dir: str = os.environ.get("AUDIO_DIR", "public/tts-audio")
    audio_url_prefix: str = os.environ.get("AUDIO_URL_PREFIX", "/tts-audio")
    story_subject: str = os.environ.get("STORY_SUBJECT", "this person")
    story_default_length: int = 500
    log_level: str = os.environ.get("LOG_LEVEL", "INFO")

    def __post_init__(self) -> None:
        # Speech falls back to the model credential when no dedicated key is set
        if not self.tts_api_key:
            self.tts_api_key = self.openai_api_key

        self.temperature = _float(os.environ.get("OPENAI_TEMPERATURE"), self.temperature)
        self.tts_speed = _float(os.environ.get("TTS_SPEED"), self.tts_speed)

        configured_extensions = _split_list(os.environ.get("CORPUS_EXTENSIONS"))
        if configured_extensions:
            self.corpus_extensions = [
                ext if ext.startswith(".") else f".{ext}" for ext in configured_extensions
            ]

        configured_urls = _split_list(os.environ.get("CORPUS_URLS"))
        if configured_urls:
            self.corpus_urls = configured_urls

        self.corpus_timeout = _positive_int(
            os.environ.get("CORPUS_TIMEOUT"), self.corpus_timeout
        )
        self.response_char_limit = _positive_int(
            os.environ.get("RESPONSE_CHAR_LIMIT"), self.response_char_limit
        )
        self.max_history_messages = _positive_int(
            os.environ.get("MAX_HISTORY_MESSAGES"), self.max_history_messages
        )
        self.max_sessions = _positive_int(
            os.environ.get("MAX_SESSIONS"), self.max_sessions
        )
        self.story_default_length = _positive_int(
            os.environ.get("STORY_DEFAULT_LENGTH"), self.story_default_length
        )


settings = Settings()
