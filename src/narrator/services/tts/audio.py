"""Reassemble per-segment audio fragments into a single playable file."""

from __future__ import annotations

import io
import logging
import math
import struct
from typing import Sequence

from .types import AudioArtifact, AudioEncoding

logger = logging.getLogger(__name__)

WAV_HEADER_SIZE = 44
DEFAULT_SAMPLE_RATE = 24000
DEFAULT_CHANNELS = 1
DEFAULT_BITS_PER_SAMPLE = 16
WORDS_PER_MINUTE = 150

_MEDIA_TYPES: dict[AudioEncoding, tuple[str, str]] = {
    AudioEncoding.PCM_S16LE: ("audio/wav", ".wav"),
    AudioEncoding.MP3: ("audio/mpeg", ".mp3"),
}


def build_wav_header(
    data_size: int,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
    channels: int = DEFAULT_CHANNELS,
    bits_per_sample: int = DEFAULT_BITS_PER_SAMPLE,
) -> bytes:
    """Return the canonical 44-byte RIFF/WAVE header for ``data_size`` PCM bytes."""
    byte_rate = sample_rate * channels * bits_per_sample // 8
    block_align = channels * bits_per_sample // 8

    buf = io.BytesIO()
    # RIFF header
    buf.write(b"RIFF")
    buf.write(struct.pack("<I", 36 + data_size))
    buf.write(b"WAVE")
    # fmt chunk
    buf.write(b"fmt ")
    buf.write(struct.pack("<I", 16))  # chunk size
    buf.write(
        struct.pack(
            "<HHIIHH",
            1,  # PCM format
            channels,
            sample_rate,
            byte_rate,
            block_align,
            bits_per_sample,
        )
    )
    # data chunk
    buf.write(b"data")
    buf.write(struct.pack("<I", data_size))

    return buf.getvalue()


def estimate_pcm_duration(
    data_size: int,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
    channels: int = DEFAULT_CHANNELS,
    bits_per_sample: int = DEFAULT_BITS_PER_SAMPLE,
) -> float:
    """Approximate playback length from the PCM payload size."""
    bytes_per_second = sample_rate * channels * (bits_per_sample // 8)
    if bytes_per_second <= 0:
        return 0.0
    return data_size / bytes_per_second


def estimate_speech_duration(word_count: int) -> int:
    """Approximate playback length assuming a speaking rate of 150 words per minute."""
    return math.ceil(word_count / WORDS_PER_MINUTE * 60)


def assemble_audio(
    fragments: Sequence[bytes],
    encoding: AudioEncoding,
    *,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
    word_count: int = 0,
) -> AudioArtifact:
    """
    Concatenate fragments in order into a single audio artifact.

    PCM fragments are joined and prefixed with exactly one WAV header; encoded
    fragments are joined as-is. The reported duration is an estimate: derived
    from the payload size for PCM and from ``word_count`` otherwise.
    """
    if not fragments:
        raise ValueError("Cannot assemble audio from zero fragments")

    payload = b"".join(fragments)
    media_type, extension = _MEDIA_TYPES[encoding]

    if encoding is AudioEncoding.PCM_S16LE:
        content = build_wav_header(len(payload), sample_rate=sample_rate) + payload
        duration = estimate_pcm_duration(len(payload), sample_rate=sample_rate)
    else:
        content = payload
        duration = float(estimate_speech_duration(word_count))

    logger.debug(
        "Assembled %d fragment(s) into %d bytes of %s (~%.1fs)",
        len(fragments),
        len(content),
        media_type,
        duration,
    )
    return AudioArtifact(
        content=content,
        duration_seconds=duration,
        byte_size=len(content),
        media_type=media_type,
        file_extension=extension,
    )


def media_type_for_filename(filename: str) -> str:
    for media_type, extension in _MEDIA_TYPES.values():
        if filename.lower().endswith(extension):
            return media_type
    return "application/octet-stream"


__all__ = [
    "WAV_HEADER_SIZE",
    "assemble_audio",
    "build_wav_header",
    "estimate_pcm_duration",
    "estimate_speech_duration",
    "media_type_for_filename",
]
