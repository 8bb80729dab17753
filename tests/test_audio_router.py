from __future__ import annotations

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from narrator.app import create_app
from narrator.config import get_settings

_CONTENT = bytes(range(256)) * 4


@pytest.fixture
def audio_client(monkeypatch, tmp_path) -> Generator[TestClient, None, None]:
    audio_dir = tmp_path / "audio"
    monkeypatch.setenv("AUDIO_DIR", str(audio_dir))
    monkeypatch.setenv("TTS_DATABASE_PATH", str(tmp_path / "tts.db"))
    monkeypatch.setenv("AUDIO_RETENTION_HOURS", "0")
    get_settings.cache_clear()

    app = create_app()

    with TestClient(app) as client:
        (audio_dir / "clip.mp3").write_bytes(_CONTENT)
        yield client

    get_settings.cache_clear()


def test_full_download(audio_client: TestClient) -> None:
    response = audio_client.get("/api/audio/clip.mp3")

    assert response.status_code == 200
    assert response.content == _CONTENT
    assert response.headers["content-type"] == "audio/mpeg"
    assert response.headers["accept-ranges"] == "bytes"
    assert response.headers["cache-control"] == "public, max-age=31536000"


def test_partial_download(audio_client: TestClient) -> None:
    response = audio_client.get("/api/audio/clip.mp3", headers={"Range": "bytes=100-199"})

    assert response.status_code == 206
    assert response.content == _CONTENT[100:200]
    assert response.headers["content-range"] == f"bytes 100-199/{len(_CONTENT)}"
    assert response.headers["content-length"] == "100"


def test_open_ended_and_suffix_ranges(audio_client: TestClient) -> None:
    tail = audio_client.get("/api/audio/clip.mp3", headers={"Range": "bytes=1000-"})
    assert tail.status_code == 206
    assert tail.content == _CONTENT[1000:]

    suffix = audio_client.get("/api/audio/clip.mp3", headers={"Range": "bytes=-24"})
    assert suffix.status_code == 206
    assert suffix.content == _CONTENT[-24:]


def test_multiple_ranges_are_not_answered_with_the_whole_file(audio_client: TestClient) -> None:
    response = audio_client.get("/api/audio/clip.mp3", headers={"Range": "bytes=0-1,5-6"})

    assert response.status_code == 206
    assert response.headers["content-type"].startswith("multipart/byteranges")
    assert response.content != _CONTENT


def test_range_past_end_is_unsatisfiable(audio_client: TestClient) -> None:
    response = audio_client.get("/api/audio/clip.mp3", headers={"Range": "bytes=5000-"})

    assert response.status_code == 416
    assert response.headers["content-range"].endswith(f"*/{len(_CONTENT)}")


@pytest.mark.parametrize("filename", ["missing.wav", "clip.txt", "clip"])
def test_unknown_audio_returns_404(audio_client: TestClient, filename: str) -> None:
    response = audio_client.get(f"/api/audio/{filename}")

    assert response.status_code == 404
