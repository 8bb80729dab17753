from __future__ import annotations

import struct

import pytest

from narrator.services.tts.audio import (
    WAV_HEADER_SIZE,
    assemble_audio,
    build_wav_header,
    estimate_pcm_duration,
    estimate_speech_duration,
    media_type_for_filename,
)
from narrator.services.tts.types import AudioEncoding


def test_wav_header_layout() -> None:
    header = build_wav_header(1000, sample_rate=24000)

    assert len(header) == WAV_HEADER_SIZE
    assert header[0:4] == b"RIFF"
    assert struct.unpack("<I", header[4:8])[0] == 36 + 1000
    assert header[8:12] == b"WAVE"
    assert header[12:16] == b"fmt "
    fmt_size, audio_format, channels, sample_rate, byte_rate, block_align, bits = struct.unpack(
        "<IHHIIHH", header[16:36]
    )
    assert fmt_size == 16
    assert audio_format == 1
    assert channels == 1
    assert sample_rate == 24000
    assert byte_rate == 48000
    assert block_align == 2
    assert bits == 16
    assert header[36:40] == b"data"
    assert struct.unpack("<I", header[40:44])[0] == 1000


def test_pcm_fragments_get_one_header_and_keep_order() -> None:
    fragments = [b"\x01\x00" * 10, b"\x02\x00" * 20, b"\x03\x00" * 5]
    payload = b"".join(fragments)

    artifact = assemble_audio(fragments, AudioEncoding.PCM_S16LE, sample_rate=24000)

    assert artifact.byte_size == len(payload) + WAV_HEADER_SIZE
    assert artifact.content[WAV_HEADER_SIZE:] == payload
    assert artifact.content.count(b"RIFF") == 1
    assert struct.unpack("<I", artifact.content[4:8])[0] == 36 + len(payload)
    assert struct.unpack("<I", artifact.content[40:44])[0] == len(payload)
    assert artifact.media_type == "audio/wav"
    assert artifact.file_extension == ".wav"
    assert artifact.audio_url is None


def test_pcm_duration_derived_from_payload_size() -> None:
    one_second = b"\x00" * 48000

    artifact = assemble_audio([one_second, one_second], AudioEncoding.PCM_S16LE)

    assert artifact.duration_seconds == pytest.approx(2.0)
    assert estimate_pcm_duration(24000, sample_rate=24000) == pytest.approx(0.5)


def test_encoded_fragments_are_concatenated_without_header() -> None:
    fragments = [b"ID3first", b"\xff\xfbsecond"]

    artifact = assemble_audio(fragments, AudioEncoding.MP3, word_count=300)

    assert artifact.content == b"ID3first\xff\xfbsecond"
    assert artifact.byte_size == len(artifact.content)
    assert artifact.media_type == "audio/mpeg"
    assert artifact.file_extension == ".mp3"
    assert artifact.duration_seconds == 120.0


def test_speech_duration_estimate_rounds_up() -> None:
    assert estimate_speech_duration(0) == 0
    assert estimate_speech_duration(1) == 1
    assert estimate_speech_duration(150) == 60
    assert estimate_speech_duration(151) == 61


def test_assemble_rejects_empty_fragment_list() -> None:
    with pytest.raises(ValueError):
        assemble_audio([], AudioEncoding.PCM_S16LE)


def test_with_url_returns_copy() -> None:
    artifact = assemble_audio([b"\x00\x00"], AudioEncoding.PCM_S16LE)
    stored = artifact.with_url("/api/audio/abc.wav")

    assert stored.audio_url == "/api/audio/abc.wav"
    assert stored.content == artifact.content
    assert artifact.audio_url is None


def test_media_type_for_filename() -> None:
    assert media_type_for_filename("a.wav") == "audio/wav"
    assert media_type_for_filename("b.MP3") == "audio/mpeg"
    assert media_type_for_filename("c.bin") == "application/octet-stream"
