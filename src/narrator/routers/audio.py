"""Serve stored audio files, including byte-range requests for streaming playback."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import FileResponse

from ..services.audio_store import AudioFileStore, AudioNotFound
from ..services.tts.audio import media_type_for_filename

router = APIRouter(prefix="/api/audio", tags=["audio"])


def get_audio_store(request: Request) -> AudioFileStore:
    store = getattr(request.app.state, "audio_store", None)
    if store is None:
        raise HTTPException(status_code=500, detail="Audio store unavailable")
    return store


@router.get("/{filename}")
async def get_audio(
    filename: str,
    store: AudioFileStore = Depends(get_audio_store),
) -> FileResponse:
    try:
        path = store.resolve(filename)
    except AudioNotFound as exc:
        raise HTTPException(status_code=404, detail="Audio file not found") from exc

    # FileResponse streams from disk and answers Range requests (206/416) itself
    return FileResponse(
        path,
        media_type=media_type_for_filename(path.name),
        headers={
            "Accept-Ranges": "bytes",
            "Cache-Control": "public, max-age=31536000",
        },
    )


__all__ = ["router", "get_audio_store"]
