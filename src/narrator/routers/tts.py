"""Routes for submitting speech generation jobs and checking their status."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, status

from ..repository import TtsRequestRepository
from ..schemas.tts import TtsGenerateRequest, TtsGenerateResponse, TtsRequestResource
from ..services.tts.errors import ConfigurationError, ProviderError, SynthesisValidationError
from ..services.tts.types import SynthesisRequest
from ..services.tts_service import TTSService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/tts", tags=["tts"])


def get_tts_service(request: Request) -> TTSService:
    service = getattr(request.app.state, "tts_service", None)
    if service is None:
        raise HTTPException(status_code=500, detail="TTS service unavailable")
    return service


def get_repository(request: Request) -> TtsRequestRepository:
    repository = getattr(request.app.state, "tts_repository", None)
    if repository is None:
        raise HTTPException(status_code=500, detail="Request store unavailable")
    return repository


def provider_error_to_http(exc: ProviderError) -> HTTPException:
    """Provider failures are server-side from the caller's point of view."""
    status_code = (
        status.HTTP_504_GATEWAY_TIMEOUT
        if exc.status_code == status.HTTP_504_GATEWAY_TIMEOUT
        else status.HTTP_502_BAD_GATEWAY
    )
    detail = {
        "error": "Failed to generate speech",
        "provider_status": exc.status_code,
        "message": str(exc.detail),
    }
    return HTTPException(status_code=status_code, detail=detail)


@router.post("/generate", response_model=TtsGenerateResponse, response_model_by_alias=False)
async def generate_speech(
    body: TtsGenerateRequest,
    service: TTSService = Depends(get_tts_service),
    repository: TtsRequestRepository = Depends(get_repository),
) -> TtsGenerateResponse:
    synthesis_request = SynthesisRequest(
        text=body.text,
        language_code=body.language,
        voice_id=body.voice,
        speed=body.speed,
        pitch=body.pitch,
    )
    try:
        service.validate(synthesis_request)
    except SynthesisValidationError as exc:
        raise HTTPException(
            status_code=400,
            detail={"error": "Validation error", "details": str(exc)},
        ) from exc

    record = await repository.create_request(
        text=body.text,
        language=body.language,
        voice=body.voice,
        speed=body.speed,
        pitch=body.pitch,
    )
    logger.info(
        f"TTS request {record.id}: {len(body.text)} chars, voice={body.voice}, "
        f"speed={body.speed}, pitch={body.pitch}"
    )

    try:
        artifact = await service.generate_speech(synthesis_request)
    except SynthesisValidationError as exc:
        await repository.fail_request(record.id, str(exc))
        raise HTTPException(
            status_code=400,
            detail={"error": "Validation error", "details": str(exc)},
        ) from exc
    except ConfigurationError as exc:
        logger.error(f"TTS request {record.id} failed: {exc}")
        await repository.fail_request(record.id, str(exc))
        raise HTTPException(
            status_code=503, detail="Speech synthesis is not configured on server"
        ) from exc
    except ProviderError as exc:
        logger.error(f"TTS request {record.id} failed: {exc.status_code} - {exc.detail}")
        await repository.fail_request(record.id, str(exc.detail))
        raise provider_error_to_http(exc) from exc

    assert artifact.audio_url is not None
    await repository.complete_request(
        record.id,
        audio_url=artifact.audio_url,
        duration=artifact.duration_seconds,
        file_size=artifact.byte_size,
    )

    return TtsGenerateResponse(
        id=record.id,
        audio_url=artifact.audio_url,
        duration=artifact.duration_seconds,
        file_size=artifact.byte_size,
    )


@router.get("/{request_id}", response_model=TtsRequestResource, response_model_by_alias=False)
async def get_tts_request(
    request_id: int,
    repository: TtsRequestRepository = Depends(get_repository),
) -> dict[str, Any]:
    record = await repository.get_request(request_id)
    if record is None:
        raise HTTPException(status_code=404, detail="TTS request not found")
    return record.to_dict()


__all__ = ["router", "get_repository", "get_tts_service", "provider_error_to_http"]
