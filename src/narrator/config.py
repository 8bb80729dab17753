"""Application configuration using environment variables."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, AnyHttpUrl, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve the project root once so that `.env` is discovered regardless of CWD
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    """Load configuration from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    tts_provider: Literal["gemini", "google"] = Field(
        default="gemini",
        validation_alias=AliasChoices("TTS_PROVIDER", "tts_provider"),
    )

    # Gemini speech generation
    gemini_api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "gemini_api_key"),
    )
    gemini_base_url: AnyHttpUrl = Field(
        default_factory=lambda: AnyHttpUrl(
            "https://generativelanguage.googleapis.com/v1beta"
        ),
        validation_alias=AliasChoices("GEMINI_BASE_URL", "gemini_base_url"),
    )
    gemini_tts_model: str = Field(
        default="gemini-2.5-flash-preview-tts",
        validation_alias=AliasChoices("GEMINI_TTS_MODEL", "gemini_tts_model"),
    )

    # Google Cloud Text-to-Speech
    google_tts_api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("GOOGLE_TTS_API_KEY", "google_tts_api_key"),
    )
    google_tts_base_url: AnyHttpUrl = Field(
        default_factory=lambda: AnyHttpUrl("https://texttospeech.googleapis.com/v1"),
        validation_alias=AliasChoices("GOOGLE_TTS_BASE_URL", "google_tts_base_url"),
    )

    request_timeout: float = Field(
        default=60.0,
        validation_alias=AliasChoices("TTS_REQUEST_TIMEOUT", "request_timeout"),
        ge=1,
    )
    job_timeout_seconds: float = Field(
        default=600.0,
        validation_alias=AliasChoices("TTS_JOB_TIMEOUT", "job_timeout_seconds"),
        ge=1,
    )
    max_segment_chars: int = Field(
        default=5000,
        validation_alias=AliasChoices("TTS_MAX_SEGMENT_CHARS", "max_segment_chars"),
        ge=1,
    )
    max_text_chars: int = Field(
        default=50000,
        validation_alias=AliasChoices("TTS_MAX_TEXT_CHARS", "max_text_chars"),
        ge=1,
    )

    audio_dir: Path = Field(
        default_factory=lambda: Path("data/audio"),
        validation_alias=AliasChoices("AUDIO_DIR", "audio_dir"),
    )
    database_path: Path = Field(
        default_factory=lambda: Path("data/tts_requests.db"),
        validation_alias=AliasChoices("TTS_DATABASE_PATH", "database_path"),
    )
    audio_retention_hours: int = Field(
        default=48,
        ge=0,
        validation_alias=AliasChoices(
            "AUDIO_RETENTION_HOURS",
            "audio_retention_hours",
        ),
        description="Stored audio older than this is deleted (0 keeps files forever).",
    )

    cors_allow_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        validation_alias=AliasChoices("CORS_ALLOW_ORIGINS", "cors_allow_origins"),
    )

    @property
    def provider_configured(self) -> bool:
        key = (
            self.google_tts_api_key
            if self.tts_provider == "google"
            else self.gemini_api_key
        )
        return bool(key and key.get_secret_value())


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached `Settings` instance."""

    return Settings()  # pyright: ignore[reportCallIssue]


__all__ = ["Settings", "get_settings"]
