"""HTTP clients for the cloud text-to-speech providers."""

from __future__ import annotations

import base64
import binascii
import logging
from typing import TYPE_CHECKING, Any

import httpx
from fastapi import status

from .errors import ConfigurationError, ProviderError
from .types import AudioEncoding, SpeechProvider, VoiceParams
from .voices import map_voice_to_gemini, map_voice_to_google_cloud

if TYPE_CHECKING:
    from ...config import Settings

logger = logging.getLogger(__name__)

GEMINI_SAMPLE_RATE = 24000  # Gemini TTS returns 24kHz mono 16-bit PCM


def get_speed_instruction(speed: float) -> str:
    """Return the spoken-style instruction for a speed multiplier."""
    if speed < 0.7:
        return "Speak very slowly. "
    if speed < 0.9:
        return "Speak slowly. "
    if speed > 1.5:
        return "Speak very quickly. "
    if speed > 1.2:
        return "Speak quickly. "
    return ""


def get_pitch_instruction(pitch: float) -> str:
    """Return the spoken-style instruction for a pitch offset."""
    if pitch < -10:
        return "Use a very low pitch. "
    if pitch < -5:
        return "Use a low pitch. "
    if pitch > 10:
        return "Use a very high pitch. "
    if pitch > 5:
        return "Use a high pitch. "
    return ""


def build_prompt(segment: str, params: VoiceParams) -> str:
    return (
        f"{get_speed_instruction(params.speed)}"
        f"{get_pitch_instruction(params.pitch)}"
        f"Say: {segment}"
    )


class _HttpSpeechProvider:
    """Shared transport and error mapping for JSON-over-HTTP providers."""

    name = "http"

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str,
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not api_key:
            raise ConfigurationError(f"{self.name} API key is not configured")
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client = client

    def _get_http_client(self) -> httpx.AsyncClient:
        """Return the pooled client, creating it on first use."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout, connect=10.0)
            )
            logger.info("Created httpx.AsyncClient for %s TTS", self.name)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("Closed %s TTS HTTP client", self.name)

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "x-goog-api-key": self._api_key,
            "Content-Type": "application/json",
        }

    async def _post_json(self, url: str, payload: dict[str, Any]) -> dict[str, Any]:
        client = self._get_http_client()
        try:
            response = await client.post(url, headers=self._headers, json=payload)
        except httpx.TimeoutException as exc:
            raise ProviderError(
                status.HTTP_504_GATEWAY_TIMEOUT,
                f"{self.name} TTS request timed out",
            ) from exc
        except httpx.HTTPError as exc:
            raise ProviderError(status.HTTP_502_BAD_GATEWAY, str(exc)) from exc

        if response.status_code >= 400:
            detail = self._extract_error_detail(response)
            logger.error(
                "%s TTS API error: %s - %s", self.name, response.status_code, detail
            )
            raise ProviderError(response.status_code, detail)

        try:
            body = response.json()
        except ValueError as exc:
            raise ProviderError(
                status.HTTP_502_BAD_GATEWAY,
                f"{self.name} TTS returned a non-JSON response",
            ) from exc
        if not isinstance(body, dict):
            raise ProviderError(
                status.HTTP_502_BAD_GATEWAY,
                f"{self.name} TTS returned an unexpected response",
            )
        return body

    def _extract_error_detail(self, response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or "Unknown error"
        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict) and error.get("message"):
                return str(error["message"])
            if isinstance(error, str) and error:
                return error
        return "Unknown error"

    def _decode_audio(self, data: Any) -> bytes:
        if not isinstance(data, str) or not data:
            raise ProviderError(
                status.HTTP_502_BAD_GATEWAY,
                f"No audio content received from {self.name} TTS API",
            )
        try:
            audio = base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ProviderError(
                status.HTTP_502_BAD_GATEWAY,
                f"{self.name} TTS returned malformed audio data",
            ) from exc
        if not audio:
            raise ProviderError(
                status.HTTP_502_BAD_GATEWAY,
                f"No audio content received from {self.name} TTS API",
            )
        return audio


class GeminiSpeechProvider(_HttpSpeechProvider):
    """
    Gemini speech generation.

    Gemini has no numeric speed/pitch controls, so both are expressed as
    natural-language instructions ahead of the text. Audio comes back as
    base64-encoded raw PCM that needs a container header before playback.
    """

    name = "gemini"
    encoding = AudioEncoding.PCM_S16LE
    sample_rate = GEMINI_SAMPLE_RATE

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        model: str = "gemini-2.5-flash-preview-tts",
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(api_key, base_url=base_url, timeout=timeout, client=client)
        self._model = model

    @property
    def endpoint(self) -> str:
        return f"{self._base_url}/models/{self._model}:generateContent"

    def build_payload(self, segment: str, params: VoiceParams) -> dict[str, Any]:
        return {
            "contents": [{"parts": [{"text": build_prompt(segment, params)}]}],
            "generationConfig": {
                "responseModalities": ["AUDIO"],
                "speechConfig": {
                    "voiceConfig": {
                        "prebuiltVoiceConfig": {
                            "voiceName": map_voice_to_gemini(params.voice_id),
                        }
                    }
                },
            },
        }

    async def synthesize(self, segment: str, params: VoiceParams) -> bytes:
        body = await self._post_json(self.endpoint, self.build_payload(segment, params))

        data = None
        candidates = body.get("candidates")
        if isinstance(candidates, list) and candidates:
            try:
                data = candidates[0]["content"]["parts"][0]["inlineData"]["data"]
            except (KeyError, IndexError, TypeError):
                data = None

        audio = self._decode_audio(data)
        logger.info(
            "Gemini TTS synthesized %d bytes for text: %s...", len(audio), segment[:50]
        )
        return audio


class GoogleCloudSpeechProvider(_HttpSpeechProvider):
    """Google Cloud Text-to-Speech with numeric speaking rate and pitch."""

    name = "google"
    encoding = AudioEncoding.MP3
    sample_rate = 24000

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = "https://texttospeech.googleapis.com/v1",
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(api_key, base_url=base_url, timeout=timeout, client=client)

    @property
    def endpoint(self) -> str:
        return f"{self._base_url}/text:synthesize"

    def build_payload(self, segment: str, params: VoiceParams) -> dict[str, Any]:
        voice_name, language_code = map_voice_to_google_cloud(
            params.voice_id, params.language_code
        )
        return {
            "input": {"text": segment},
            "voice": {"languageCode": language_code, "name": voice_name},
            "audioConfig": {
                "audioEncoding": "MP3",
                "speakingRate": params.speed,
                "pitch": params.pitch,
                "sampleRateHertz": self.sample_rate,
            },
        }

    async def synthesize(self, segment: str, params: VoiceParams) -> bytes:
        body = await self._post_json(self.endpoint, self.build_payload(segment, params))
        audio = self._decode_audio(body.get("audioContent"))
        logger.info(
            "Google Cloud TTS synthesized %d bytes for text: %s...",
            len(audio),
            segment[:50],
        )
        return audio


def create_speech_provider(settings: "Settings") -> SpeechProvider:
    """Build the provider selected by ``settings.tts_provider``."""
    provider = settings.tts_provider

    if provider == "google":
        if not settings.google_tts_api_key or not settings.google_tts_api_key.get_secret_value():
            raise ConfigurationError("Google Cloud TTS API key not configured")
        return GoogleCloudSpeechProvider(
            settings.google_tts_api_key.get_secret_value(),
            base_url=str(settings.google_tts_base_url),
            timeout=settings.request_timeout,
        )

    if not settings.gemini_api_key or not settings.gemini_api_key.get_secret_value():
        raise ConfigurationError("Gemini API key not configured")
    return GeminiSpeechProvider(
        settings.gemini_api_key.get_secret_value(),
        base_url=str(settings.gemini_base_url),
        model=settings.gemini_tts_model,
        timeout=settings.request_timeout,
    )


__all__ = [
    "GeminiSpeechProvider",
    "GoogleCloudSpeechProvider",
    "build_prompt",
    "create_speech_provider",
    "get_pitch_instruction",
    "get_speed_instruction",
]
