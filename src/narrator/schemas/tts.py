"""Request and response schemas for speech generation endpoints."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class TtsGenerateRequest(BaseModel):
    """Body of a speech generation request."""

    text: str = Field(..., min_length=1, description="Text to speak.")
    language: str = Field(..., min_length=1, description="BCP-47 language code, e.g. 'en-US'.")
    voice: str = Field(..., min_length=1, description="Catalog voice name, e.g. 'en-US-Neural2-C'.")
    speed: float = Field(default=1.0, ge=0.5, le=2.0, description="Speaking rate multiplier.")
    pitch: float = Field(default=0.0, ge=-20, le=20, description="Pitch offset.")


class TtsGenerateResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    audioUrl: str = Field(alias="audio_url")
    duration: float = Field(description="Estimated duration in seconds.")
    fileSize: int = Field(alias="file_size")


class TtsRequestResource(BaseModel):
    """Stored state of a speech generation request."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    text: str
    language: str
    voice: str
    speed: float
    pitch: float
    status: str
    audioUrl: str | None = Field(default=None, alias="audio_url")
    duration: float | None = None
    fileSize: int | None = Field(default=None, alias="file_size")
    error: str | None = None
    createdAt: str = Field(alias="created_at")
    updatedAt: str = Field(alias="updated_at")


class VoiceResource(BaseModel):
    name: str
    gender: str
    type: str
    displayName: str


class VoicePreviewRequest(BaseModel):
    language: str = Field(..., min_length=1)
    voice: str = Field(..., min_length=1)
