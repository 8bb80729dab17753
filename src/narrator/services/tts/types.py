"""Type definitions for the speech synthesis subsystem."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Protocol


class AudioEncoding(str, Enum):
    """Payload layout returned by a provider for one segment."""

    PCM_S16LE = "pcm_s16le"
    MP3 = "mp3"


@dataclass(frozen=True)
class SynthesisRequest:
    text: str
    language_code: str
    voice_id: str
    speed: float = 1.0
    pitch: float = 0.0

    @property
    def voice_params(self) -> "VoiceParams":
        return VoiceParams(
            voice_id=self.voice_id,
            language_code=self.language_code,
            speed=self.speed,
            pitch=self.pitch,
        )


@dataclass(frozen=True)
class VoiceParams:
    voice_id: str
    language_code: str
    speed: float = 1.0
    pitch: float = 0.0


@dataclass(frozen=True)
class AudioArtifact:
    """Final assembled audio plus the metadata reported to clients.

    ``duration_seconds`` is an estimate, never measured from decoded audio.
    """

    content: bytes
    duration_seconds: float
    byte_size: int
    media_type: str
    file_extension: str
    audio_url: str | None = None

    def with_url(self, audio_url: str) -> "AudioArtifact":
        return replace(self, audio_url=audio_url)


class SpeechProvider(Protocol):
    name: str
    encoding: AudioEncoding
    sample_rate: int

    async def synthesize(self, segment: str, params: VoiceParams) -> bytes:
        ...

    async def aclose(self) -> None:
        ...


__all__ = [
    "AudioArtifact",
    "AudioEncoding",
    "SpeechProvider",
    "SynthesisRequest",
    "VoiceParams",
]
