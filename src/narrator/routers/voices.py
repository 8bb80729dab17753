from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from ..schemas.tts import VoicePreviewRequest, VoiceResource
from ..services.tts.errors import ConfigurationError, ProviderError, SynthesisValidationError
from ..services.tts.voices import get_voices_for_language
from ..services.tts_service import TTSService
from .tts import get_tts_service, provider_error_to_http

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/voices", tags=["voices"])


@router.get("/{language}", response_model=list[VoiceResource])
async def list_voices(language: str) -> list[dict[str, Any]]:
    return [voice.to_dict() for voice in get_voices_for_language(language)]


@router.post("/preview")
async def preview_voice(
    body: VoicePreviewRequest,
    service: TTSService = Depends(get_tts_service),
) -> Response:
    try:
        artifact = await service.preview_voice(body.language, body.voice)
    except SynthesisValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ConfigurationError as exc:
        logger.error(f"Voice preview unavailable: {exc}")
        raise HTTPException(
            status_code=503, detail="Speech synthesis is not configured on server"
        ) from exc
    except ProviderError as exc:
        logger.error(f"Voice preview failed: {exc.status_code} - {exc.detail}")
        raise provider_error_to_http(exc) from exc

    return Response(
        content=artifact.content,
        media_type=artifact.media_type,
        headers={"Cache-Control": "no-store"},
    )


__all__ = ["router"]
