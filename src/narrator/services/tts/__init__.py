"""
TTS (Text-to-Speech) Services Package.

This package contains the building blocks of batch speech generation:

- text_segmenter: Splits long text into provider-sized segments
- providers: HTTP clients for the cloud TTS providers
- audio: Reassembles per-segment fragments into one playable file
- voices: Voice catalog and provider voice lookup tables

Architecture Overview:

    ┌─────────────┐     ┌───────────────┐     ┌──────────────┐     ┌───────────────┐
    │ Input text  │────▶│ segment_text  │────▶│ SpeechProvider│────▶│ assemble_audio│
    └─────────────┘     └───────────────┘     └──────────────┘     └───────────────┘
                          ordered segments      one call per          header + data
                                                segment, in order            │
                                                                             ▼
                                                                     ┌─────────────┐
                                                                     │AudioArtifact│
                                                                     └─────────────┘

Segments are synthesized strictly one after another, so fragment ``i`` always
belongs to segment ``i`` and no index bookkeeping is needed at assembly time.
"""

from .audio import assemble_audio, build_wav_header
from .errors import ConfigurationError, ProviderError, SynthesisValidationError, TTSError
from .providers import GeminiSpeechProvider, GoogleCloudSpeechProvider, create_speech_provider
from .text_segmenter import segment_text
from .types import AudioArtifact, AudioEncoding, SpeechProvider, SynthesisRequest, VoiceParams

__all__ = [
    "AudioArtifact",
    "AudioEncoding",
    "ConfigurationError",
    "GeminiSpeechProvider",
    "GoogleCloudSpeechProvider",
    "ProviderError",
    "SpeechProvider",
    "SynthesisRequest",
    "SynthesisValidationError",
    "TTSError",
    "VoiceParams",
    "assemble_audio",
    "build_wav_header",
    "create_speech_provider",
    "segment_text",
]
