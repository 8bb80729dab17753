import asyncio
import logging
import time
from typing import List, Optional

from fastapi import status

from ..config import Settings
from .audio_store import AudioFileStore
from .tts.audio import assemble_audio
from .tts.errors import ProviderError, SynthesisValidationError
from .tts.providers import create_speech_provider
from .tts.text_segmenter import segment_text
from .tts.types import AudioArtifact, SpeechProvider, SynthesisRequest, VoiceParams
from .tts.voices import get_preview_text

logger = logging.getLogger(__name__)


class TTSService:
    """
    Service for batch Text-to-Speech generation.

    A request is split into provider-sized segments, each segment is sent to the
    configured provider in order, and the returned fragments are assembled into
    one audio file that is written to the audio store.

    Segments are synthesized strictly sequentially: call ``i + 1`` is only issued
    once call ``i`` has returned, which keeps provider rate limits happy and
    guarantees that ``fragments[i]`` belongs to ``segments[i]``. Any provider
    failure aborts the whole job and nothing is stored.
    """

    def __init__(
        self,
        settings: Settings,
        audio_store: AudioFileStore,
        *,
        provider: Optional[SpeechProvider] = None,
    ):
        self._settings = settings
        self._audio_store = audio_store
        self._provider = provider

        if provider is None and not settings.provider_configured:
            logger.warning(
                "No API key configured for TTS provider '%s'. Speech generation will fail until one is set.",
                settings.tts_provider,
            )

    @property
    def provider_name(self) -> str:
        if self._provider is not None:
            return self._provider.name
        return self._settings.tts_provider

    def get_provider(self) -> SpeechProvider:
        """Return the provider, building it from settings on first use.

        Raises ConfigurationError when the provider's API key is missing.
        """
        if self._provider is None:
            self._provider = create_speech_provider(self._settings)
            logger.info("TTS provider initialised: %s", self._provider.name)
        return self._provider

    async def close(self) -> None:
        """Release the provider's HTTP client. Call on app shutdown."""
        if self._provider is not None:
            await self._provider.aclose()

    def validate(self, request: SynthesisRequest) -> None:
        if not request.text or not request.text.strip():
            raise SynthesisValidationError("Text is required")
        if len(request.text) > self._settings.max_text_chars:
            raise SynthesisValidationError(
                f"Text must be less than {self._settings.max_text_chars:,} characters"
            )
        if not request.language_code.strip():
            raise SynthesisValidationError("Language is required")
        if not request.voice_id.strip():
            raise SynthesisValidationError("Voice is required")

    async def generate_speech(self, request: SynthesisRequest) -> AudioArtifact:
        """
        Synthesize ``request`` and store the resulting audio.

        Returns the stored artifact with its ``audio_url`` set.
        """
        self.validate(request)
        provider = self.get_provider()

        segments = segment_text(request.text, self._settings.max_segment_chars)
        if not segments:
            raise SynthesisValidationError("Text is required")

        start_time = time.monotonic()
        try:
            fragments = await asyncio.wait_for(
                self.synthesize_segments(provider, segments, request.voice_params),
                timeout=self._settings.job_timeout_seconds,
            )
        except asyncio.TimeoutError as exc:
            logger.error(
                "Speech generation timed out after %.0fs (%d segment(s))",
                self._settings.job_timeout_seconds,
                len(segments),
            )
            raise ProviderError(
                status.HTTP_504_GATEWAY_TIMEOUT, "Speech generation timed out"
            ) from exc

        artifact = assemble_audio(
            fragments,
            provider.encoding,
            sample_rate=provider.sample_rate,
            word_count=len(request.text.split()),
        )

        filename = await self._audio_store.save(artifact.content, artifact.file_extension)
        elapsed = (time.monotonic() - start_time) * 1000
        logger.info(
            f"Generated {artifact.byte_size} bytes from {len(segments)} segment(s) in {elapsed:.0f}ms"
        )
        return artifact.with_url(self._audio_store.url_for(filename))

    async def synthesize_segments(
        self,
        provider: SpeechProvider,
        segments: List[str],
        params: VoiceParams,
    ) -> List[bytes]:
        """Synthesize each segment in order, awaiting one call before the next."""
        fragments: List[bytes] = []
        for index, segment in enumerate(segments, start=1):
            logger.info(
                f"Synthesizing segment {index}/{len(segments)} ({len(segment)} chars)"
            )
            fragments.append(await provider.synthesize(segment, params))
        return fragments

    async def preview_voice(self, language: str, voice: str) -> AudioArtifact:
        """Synthesize the sample sentence for ``language`` with ``voice``; nothing is stored."""
        if not language.strip() or not voice.strip():
            raise SynthesisValidationError("Language and voice are required")

        provider = self.get_provider()
        text = get_preview_text(language)
        params = VoiceParams(voice_id=voice, language_code=language)

        fragment = await provider.synthesize(text, params)
        return assemble_audio(
            [fragment],
            provider.encoding,
            sample_rate=provider.sample_rate,
            word_count=len(text.split()),
        )


__all__ = ["TTSService"]
