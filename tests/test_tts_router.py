from __future__ import annotations

from collections.abc import Callable, Generator

import pytest
from fastapi.testclient import TestClient

from narrator.app import create_app
from narrator.config import get_settings
from narrator.services.tts.errors import ProviderError
from narrator.services.tts.types import AudioEncoding, VoiceParams
from narrator.services.tts_service import TTSService


class FakeProvider:
    name = "fake"
    encoding = AudioEncoding.PCM_S16LE
    sample_rate = 24000

    def __init__(self, *, fail_on: int | None = None):
        self.calls: list[str] = []
        self.fail_on = fail_on

    async def synthesize(self, segment: str, params: VoiceParams) -> bytes:
        self.calls.append(segment)
        if self.fail_on is not None and len(self.calls) == self.fail_on:
            raise ProviderError(500, "Internal error")
        return b"\x10\x00" * 500

    async def aclose(self) -> None:
        return None


@pytest.fixture
def make_client(monkeypatch, tmp_path) -> Generator[Callable[..., TestClient], None, None]:
    """Build a started test client, optionally swapping in a fake provider."""
    clients: list[TestClient] = []

    def _make(provider: FakeProvider | None = None, **env: str) -> TestClient:
        monkeypatch.setenv("AUDIO_DIR", str(tmp_path / "audio"))
        monkeypatch.setenv("TTS_DATABASE_PATH", str(tmp_path / "tts.db"))
        monkeypatch.setenv("AUDIO_RETENTION_HOURS", "0")
        monkeypatch.setenv("TTS_PROVIDER", "gemini")
        monkeypatch.setenv("GEMINI_API_KEY", "test-key")
        for key, value in env.items():
            if value:
                monkeypatch.setenv(key, value)
            else:
                monkeypatch.delenv(key, raising=False)
        get_settings.cache_clear()

        app = create_app()
        if provider is not None:
            app.state.tts_service = TTSService(
                app.state.settings, app.state.audio_store, provider=provider
            )
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)
    get_settings.cache_clear()


def _body(**overrides) -> dict:
    body = {
        "text": "Hello there. This is a short test.",
        "language": "en-US",
        "voice": "en-US-Neural2-C",
        "speed": 1.0,
        "pitch": 0,
    }
    body.update(overrides)
    return body


def test_generate_then_fetch_status_and_audio(make_client) -> None:
    provider = FakeProvider()
    client = make_client(provider)

    response = client.post("/api/tts/generate", json=_body(speed=1.4))

    assert response.status_code == 200
    payload = response.json()
    assert set(payload) == {"id", "audioUrl", "duration", "fileSize"}
    assert payload["audioUrl"].startswith("/api/audio/")
    assert payload["fileSize"] == 1000 + 44
    assert payload["duration"] == pytest.approx(1000 / 48000)
    assert provider.calls == ["Hello there. This is a short test."]

    status = client.get(f"/api/tts/{payload['id']}")
    assert status.status_code == 200
    record = status.json()
    assert record["status"] == "completed"
    assert record["audioUrl"] == payload["audioUrl"]
    assert record["fileSize"] == payload["fileSize"]
    assert record["speed"] == 1.4
    assert record["error"] is None

    audio = client.get(payload["audioUrl"])
    assert audio.status_code == 200
    assert audio.headers["content-type"] == "audio/wav"
    assert audio.headers["accept-ranges"] == "bytes"
    assert audio.content[:4] == b"RIFF"
    assert len(audio.content) == payload["fileSize"]


def test_provider_failure_marks_request_failed(make_client) -> None:
    client = make_client(FakeProvider(fail_on=1))

    response = client.post("/api/tts/generate", json=_body())

    assert response.status_code == 502
    detail = response.json()["detail"]
    assert detail["error"] == "Failed to generate speech"
    assert detail["provider_status"] == 500
    assert detail["message"] == "Internal error"

    record = client.get("/api/tts/1").json()
    assert record["status"] == "failed"
    assert record["error"] == "Internal error"
    assert record["audioUrl"] is None


def test_missing_api_key_returns_service_unavailable(make_client) -> None:
    client = make_client(GEMINI_API_KEY="")

    health = client.get("/health").json()
    assert health == {"status": "ok", "provider": "gemini", "configured": False}

    response = client.post("/api/tts/generate", json=_body())

    assert response.status_code == 503
    assert client.get("/api/tts/1").json()["status"] == "failed"


def test_text_over_limit_is_rejected_without_record(make_client) -> None:
    provider = FakeProvider()
    client = make_client(provider, TTS_MAX_TEXT_CHARS="20")

    response = client.post("/api/tts/generate", json=_body(text="x" * 21))

    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["error"] == "Validation error"
    assert "20" in detail["details"]
    assert provider.calls == []
    assert client.get("/api/tts/1").status_code == 404


def test_schema_errors_are_rejected(make_client) -> None:
    client = make_client(FakeProvider())

    assert client.post("/api/tts/generate", json=_body(text="")).status_code == 422
    assert client.post("/api/tts/generate", json=_body(speed=3.0)).status_code == 422
    assert client.post("/api/tts/generate", json=_body(pitch=-21)).status_code == 422


def test_unknown_request_returns_404(make_client) -> None:
    client = make_client(FakeProvider())

    response = client.get("/api/tts/424242")

    assert response.status_code == 404
    assert response.json()["detail"] == "TTS request not found"


def test_voice_catalog(make_client) -> None:
    client = make_client(FakeProvider())

    voices = client.get("/api/voices/en-US").json()
    assert len(voices) == 9
    assert voices[0] == {
        "name": "en-US-Neural2-A",
        "gender": "MALE",
        "type": "Neural",
        "displayName": "Alex",
    }
    assert client.get("/api/voices/xx-XX").json() == []


def test_voice_preview_returns_audio(make_client) -> None:
    provider = FakeProvider()
    client = make_client(provider)

    response = client.post(
        "/api/voices/preview", json={"language": "es-ES", "voice": "es-ES-Neural2-A"}
    )

    assert response.status_code == 200
    assert response.headers["content-type"] == "audio/wav"
    assert response.headers["cache-control"] == "no-store"
    assert response.content[:4] == b"RIFF"
    assert provider.calls[0].startswith("Hola")
